"""Property-based tests for the tree interpreter using Hypothesis.

These tests verify invariants that should hold for any render tree:
1. Output order equals input order whatever the collaborator latency
2. Match count equals the number of match-start spans
3. Rendering the same tree twice gives the same output
4. Rendering never crashes on unknown kinds
"""

import asyncio

from hypothesis import given, settings
from hypothesis import strategies as st

from vellum import TreeInterpreter
from vellum.fence import FenceResult
from vellum.nodes import (
    Code,
    Emphasis,
    FootnoteDef,
    Match,
    MatchCurrent,
    MatchCurrentStart,
    MatchStart,
    Modified,
    Paragraph,
    Strong,
    UnknownElem,
)
from vellum.output import Element, iter_elements

text = st.text(alphabet="abc <&>", max_size=5)

leaves = st.one_of(
    text,
    st.builds(Modified),
    st.builds(lambda: UnknownElem(tag="later", raw={"t": "later"})),
)


def _containers(children: st.SearchStrategy) -> st.SearchStrategy:
    kids = st.lists(children, max_size=4).map(tuple)
    return st.one_of(
        st.builds(Paragraph, kids),
        st.builds(Emphasis, kids),
        st.builds(Strong, kids),
        st.builds(Match, kids),
        st.builds(MatchStart, kids),
        st.builds(MatchCurrentStart, kids),
        st.builds(FootnoteDef, id=st.integers(1, 3), children=kids),
    )


trees = st.lists(st.recursive(leaves, _containers, max_leaves=20), max_size=6)


class DelayFence:
    """Fence whose latency is encoded in the fence language."""

    async def render(self, code: Code, position: int | None = None) -> FenceResult | None:
        await asyncio.sleep(int(code.lang or 0) / 1000)
        return FenceResult(Element("out", {}, [code.source]), False)


def _run(tree, **kwargs):  # type: ignore[no-untyped-def]
    return asyncio.run(TreeInterpreter(**kwargs).run(tree))


class TestOrderProperties:
    @given(delays=st.lists(st.integers(0, 5), min_size=1, max_size=8))
    @settings(max_examples=25, deadline=None)
    def test_output_order_matches_input(self, delays: list[int]) -> None:
        """Siblings finishing out of order are still joined by position."""
        tree = [Code((str(i),), lang=str(d)) for i, d in enumerate(delays)]
        result = _run(tree, fence=DelayFence())
        assert [node.children[0] for node in result.root.children] == [
            str(i) for i in range(len(delays))
        ]


class TestMatchCountProperties:
    @given(kinds=st.lists(st.sampled_from([Match, MatchCurrent, MatchStart, MatchCurrentStart])))
    @settings(max_examples=50)
    def test_count_equals_start_spans(self, kinds: list[type]) -> None:
        tree = [Paragraph((kind(("x",)),)) for kind in kinds]
        expected = sum(kind in (MatchStart, MatchCurrentStart) for kind in kinds)
        assert _run(tree).match_count == expected


class TestDeterminismProperties:
    @given(tree=trees)
    @settings(max_examples=50, deadline=None)
    def test_rerender_is_identical(self, tree: list) -> None:
        first = _run(tree)
        second = _run(tree)
        assert first.root == second.root
        assert first.match_count == second.match_count
        assert (first.last_modified is None) == (second.last_modified is None)

    @given(tree=trees)
    @settings(max_examples=50, deadline=None)
    def test_last_modified_is_in_output(self, tree: list) -> None:
        result = _run(tree)
        if result.last_modified is not None:
            assert any(el is result.last_modified for el in iter_elements(result.root))
