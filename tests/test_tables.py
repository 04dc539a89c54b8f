"""Tests for table column alignment in the interpreter."""

import asyncio
import logging

import pytest

from vellum import TreeInterpreter
from vellum.fence import FenceResult
from vellum.nodes import (
    Code,
    Paragraph,
    Table,
    TableBody,
    TableDataCell,
    TableHead,
    TableHeaderCell,
    TableRow,
)
from vellum.output import Element


def _table(align, *rows, head=None) -> Table:  # type: ignore[no-untyped-def]
    children = []
    if head is not None:
        children.append(TableHead((TableRow(tuple(TableHeaderCell((h,)) for h in head)),)))
    children.append(
        TableBody(tuple(TableRow(tuple(TableDataCell((cell,)) for cell in row)) for row in rows))
    )
    return Table(align=tuple(align), children=tuple(children))


def _styles(row: Element) -> list[str | None]:
    return [cell.props.get("style", {}).get("text-align") for cell in row.children]


class SlowFence:
    """Fence that finishes later for earlier fences."""

    async def render(self, code: Code, position: int | None = None) -> FenceResult | None:
        await asyncio.sleep(float(code.lang or 0))
        return FenceResult(Element("b", {}, [code.source]), False)


class TestCellAlignment:
    """Cells take the alignment of their column."""

    def test_head_and_body_rows(self) -> None:
        tree = [_table(("left", None, "right"), ("1", "2", "3"), head=("a", "b", "c"))]
        result = asyncio.run(TreeInterpreter().run(tree))
        table = result.root.children[0]
        thead, tbody = table.children
        assert thead.tag == "thead"
        assert tbody.tag == "tbody"
        assert _styles(thead.children[0]) == ["left", None, "right"]
        assert _styles(tbody.children[0]) == ["left", None, "right"]

    def test_style_shape(self) -> None:
        tree = [_table(("center",), ("x",))]
        result = asyncio.run(TreeInterpreter().run(tree))
        cell = result.root.children[0].children[0].children[0].children[0]
        assert cell == Element("td", {"style": {"text-align": "center"}}, ["x"])

    def test_extra_cells_have_no_alignment(self) -> None:
        tree = [_table(("right",), ("a", "b", "c"))]
        result = asyncio.run(TreeInterpreter().run(tree))
        row = result.root.children[0].children[0].children[0]
        assert _styles(row) == ["right", None, None]

    def test_each_row_starts_at_first_column(self) -> None:
        tree = [_table(("left", "right"), ("a", "b"), ("c", "d"), ("e", "f"))]
        result = asyncio.run(TreeInterpreter().run(tree))
        rows = result.root.children[0].children[0].children
        assert [_styles(row) for row in rows] == [["left", "right"]] * 3

    def test_following_table_resets_state(self) -> None:
        tree = [_table(("right",), ("a",)), _table((), ("b",))]
        result = asyncio.run(TreeInterpreter().run(tree))
        second_row = result.root.children[1].children[0].children[0]
        assert _styles(second_row) == [None]

    def test_nested_table_state_is_not_restored(self) -> None:
        """Leaving an inner table keeps its alignments for the outer rows."""
        inner = _table(("center",), ("in",))
        outer = Table(
            align=("right",),
            children=(
                TableBody(
                    (
                        TableRow((TableDataCell((inner,)),)),
                        TableRow((TableDataCell(("after",)),)),
                    )
                ),
            ),
        )
        result = asyncio.run(TreeInterpreter().run([outer]))
        first_row, second_row = result.root.children[0].children[0].children
        assert _styles(first_row) == ["right"]
        assert _styles(second_row) == ["center"]

    def test_cell_outside_table(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="vellum"):
            result = asyncio.run(TreeInterpreter().run([TableDataCell(("x",))]))
        assert result.root.children == [Element("td", {}, ["x"])]
        assert "outside of a table" in caplog.text


class TestAlignmentWithSuspendedCells:
    """Rows awaiting collaborators keep their own column cursor."""

    def test_slow_cells_keep_alignment_and_order(self) -> None:
        rows = []
        for delays in (("0.02", "0"), ("0", "0.01")):
            rows.append(
                TableRow(
                    tuple(
                        TableDataCell((Code((f"cell{i}",), lang=d),)) for i, d in enumerate(delays)
                    )
                )
            )
        table = Table(align=("left", "right"), children=(TableBody(tuple(rows)),))

        result = asyncio.run(TreeInterpreter(fence=SlowFence()).run([table, Paragraph(("end",))]))

        body_rows = result.root.children[0].children[0].children
        for row in body_rows:
            assert _styles(row) == ["left", "right"]
            assert [cell.children[0].children for cell in row.children] == [["cell0"], ["cell1"]]
        assert result.root.children[1] == Element("p", {}, ["end"])
