import json

import pytest

from manifest import build_manifest
from search_index import IndexHashMismatch, SearchBuild, build_indexes, publish, write_indexes

from conftest import loc


@pytest.fixture
def build_dir(valid_content, tmp_path):
    directory = tmp_path / "build"
    write_indexes(build_indexes(build_manifest(valid_content.root)), directory)
    return directory


def listing(directory):
    return sorted(path.name for path in directory.iterdir())


def test_missing_build_directory_is_a_no_op(tmp_path):
    public_dir = tmp_path / "public" / "search"

    assert publish(tmp_path / "missing", public_dir) is None
    assert not public_dir.exists()


def test_missing_meta_is_a_no_op(tmp_path):
    (tmp_path / "build").mkdir()
    assert publish(tmp_path / "build", tmp_path / "public") is None


def test_publish_writes_hashed_indexes_and_meta(build_dir, tmp_path):
    public_dir = tmp_path / "public"
    result = publish(build_dir, public_dir)

    content_hash = json.loads((build_dir / "search-meta.json").read_text(encoding="utf-8"))["hash"]
    assert result.hash == content_hash
    assert listing(public_dir) == sorted(
        [f"index-{locale}-{content_hash}.json" for locale in ("ru", "en", "cz")] + ["meta.json"]
    )
    assert (public_dir / f"index-en-{content_hash}.json").read_bytes() == \
        (build_dir / "search-index-en.json").read_bytes()
    assert (public_dir / "meta.json").read_bytes() == (build_dir / "search-meta.json").read_bytes()


def test_publish_is_idempotent(build_dir, tmp_path):
    public_dir = tmp_path / "public"
    publish(build_dir, public_dir)
    first = {name: (public_dir / name).read_bytes() for name in listing(public_dir)}

    publish(build_dir, public_dir)
    second = {name: (public_dir / name).read_bytes() for name in listing(public_dir)}

    assert first == second
    assert not any(name.endswith(".tmp") for name in second)


def test_prune_removes_only_other_hashes(build_dir, tmp_path):
    public_dir = tmp_path / "public"
    public_dir.mkdir()
    stale = public_dir / "index-en-000000000000.json"
    stale.write_text("[]", encoding="utf-8")
    unrelated = public_dir / "robots.json"
    unrelated.write_text("{}", encoding="utf-8")

    result = publish(build_dir, public_dir)
    assert stale.exists()
    assert result.removed == ()

    result = publish(build_dir, public_dir, prune=True)
    assert not stale.exists()
    assert unrelated.exists()
    assert result.removed == (stale,)
    assert len(list(public_dir.glob(f"index-*-{result.hash}.json"))) == 3


def test_missing_locale_index_is_an_error(build_dir, tmp_path):
    (build_dir / "search-index-cz.json").unlink()

    with pytest.raises(FileNotFoundError):
        publish(build_dir, tmp_path / "public")


def test_indexes_that_do_not_match_the_meta_hash_are_refused(build_dir, tmp_path):
    public_dir = tmp_path / "public"
    first = publish(build_dir, public_dir)
    published = (public_dir / f"index-en-{first.hash}.json").read_bytes()

    (build_dir / "search-index-en.json").write_bytes(b'{"documents":[],"locale":"en","version":1}\n')
    with pytest.raises(IndexHashMismatch):
        publish(build_dir, public_dir)

    assert (public_dir / f"index-en-{first.hash}.json").read_bytes() == published


def test_rewriting_indexes_drops_the_previous_meta_first(valid_content, build_dir, tmp_path):
    meta_path = build_dir / "search-meta.json"
    stale_meta = meta_path.read_bytes()
    valid_content.subject(
        "math",
        name=loc("Mathematics"),
        teachers=["ivanov"],
        categories=[{"slug": "basics", "name": loc("Basics"), "articles": ["limits"]}],
        metadata={"semester": 1, "difficulty": "medium"},
    )
    build = build_indexes(build_manifest(valid_content.root))

    class Interrupted(Exception):
        pass

    class FailingBytes(dict):
        def items(self):
            yield from list(super().items())[:1]
            raise Interrupted()

    interrupted = SearchBuild(indexes=build.indexes, serialized=FailingBytes(build.serialized), meta=build.meta)
    with pytest.raises(Interrupted):
        write_indexes(interrupted, build_dir)

    assert not meta_path.exists()
    assert publish(build_dir, tmp_path / "public") is None

    write_indexes(build, build_dir)
    assert meta_path.read_bytes() != stale_meta
    assert publish(build_dir, tmp_path / "public").hash == build.meta.hash
