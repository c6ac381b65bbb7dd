from __future__ import annotations

import io

from hypothesis import given, settings
from hypothesis import strategies as st

from jit_import import ScriptModule, TreeModuleFactory, import_module, load
from jit_import.container import ContainerReader
from tests.fixtures.archive_fixtures import ArchiveWriter, module_def, param_def, tensor_def

_names = st.text(alphabet="abcdefghij", min_size=1, max_size=4)


@st.composite
def module_trees(draw, depth=0):
    """Nested (name, children) tuples with unique sibling names."""
    if depth >= 3:
        return []
    names = draw(st.lists(_names, unique=True, max_size=3))
    return [(name, draw(module_trees(depth=depth + 1))) for name in names]


def _preorder(tree, prefix=()):
    for name, children in tree:
        path = prefix + (name,)
        yield path
        yield from _preorder(children, path)


@given(st.lists(st.binary(max_size=200), min_size=1, max_size=8))
def test_reader_returns_every_record(payloads):
    writer = ArchiveWriter()
    for key, payload in enumerate(payloads):
        writer.add_record(payload, key=key * 3)
    reader = ContainerReader(io.BytesIO(writer.finish(b"{}")))
    for key, payload in enumerate(payloads):
        assert reader.get_record_by_key(key * 3) == (payload, len(payload))


@settings(max_examples=50, deadline=None)
@given(
    sizes=st.lists(st.integers(min_value=1, max_value=16), min_size=1, max_size=5),
    picks=st.lists(st.integers(min_value=0, max_value=4), min_size=1, max_size=12),
)
def test_distinct_storages_match_distinct_keys(sizes, picks):
    writer = ArchiveWriter()
    for key, n in enumerate(sizes):
        writer.add_record(bytes(range(n)) * 4, key=key)
    arena = writer.add_record(b"")
    keys = [p % len(sizes) for p in picks]
    data = writer.finish(
        {
            "main_module": module_def(
                "m", (arena, 0), parameters=[param_def(f"t{i}", i) for i in range(len(keys))]
            ),
            "tensors": [tensor_def(k, sizes[k] * 4, [sizes[k]]) for k in keys],
        }
    )

    root = load(io.BytesIO(data))
    storages = {p.untyped_storage().data_ptr(): p.untyped_storage().nbytes() for p in root.parameters()}
    assert len(storages) == len(set(keys))
    assert sum(storages.values()) == sum(sizes[k] * 4 for k in set(keys))


@settings(max_examples=50, deadline=None)
@given(module_trees())
def test_module_tree_shape_is_preserved(tree):
    writer = ArchiveWriter()
    arena = writer.add_record(b"")

    def to_def(name, children):
        return module_def(name, (arena, 0), submodules=[to_def(*c) for c in children])

    data = writer.finish({"main_module": to_def("root", tree)})

    root = ScriptModule()
    visited = []
    factory = TreeModuleFactory(root)

    def lookup(path):
        visited.append(tuple(path))
        return factory.get_or_create(path)

    import_module(lookup, io.BytesIO(data))
    expected = list(_preorder(tree))
    assert visited == [()] + expected
    assert [tuple(n.split(".")) for n, _ in root.named_modules() if n] == expected
