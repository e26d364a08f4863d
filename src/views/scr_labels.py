from typing import List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label

from core.errors import PrintFailed, SearchFailed
from core.models import NormalizedProduct
from core.search import SearchState
from utils.messages import QueueChangedMessage, SearchChangedMessage, SearchFailedMessage
from views.base_screen import BaseScreen

STATUS_TEXT = {
    SearchState.IDLE: "",
    SearchState.DEBOUNCING: "Typing...",
    SearchState.SEARCHING: "Searching...",
    SearchState.READY: "",
    SearchState.FAILED: "Search failed, showing previous results.",
}


class LabelScreen(BaseScreen):
    """
    Search products on the left, build the print queue on the right.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Print Labels")
        self._visible: List[NormalizedProduct] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="div-main"):
            with Vertical(id="div-left"):
                with Horizontal(id="div-search"):
                    yield Input(
                        id="input-search", placeholder="Search Product (Name/Code)..."
                    )
                    yield Button("Search", id="btn-search", variant="primary")
                yield Label("", id="label-search-status")
                yield DataTable(id="table-results")
                with Horizontal(id="div-add"):
                    yield Label("Qty ")
                    yield Input("1", id="input-qty", type="integer")
                    yield Button("Add", id="btn-add")
                with Horizontal(id="div-pagination"):
                    yield Button("Previous", id="btn-prev")
                    yield Label("Page 1 of 1", id="label-page")
                    yield Button("Next", id="btn-next")
            with Vertical(id="div-right"):
                yield Label("Print Queue", id="label-queue-title")
                yield DataTable(id="table-queue")
                yield Label("Your print queue is empty.", id="label-queue-empty")
                with Horizontal(id="div-queue-btns"):
                    yield Button("Remove", id="btn-remove", variant="warning")
                    yield Button("Reset All", id="btn-reset", variant="error")
                yield Button("Print 0 Labels", id="btn-print", variant="success")

    def on_mount(self):
        results = self.query_one("#table-results", DataTable)
        results.cursor_type = "row"
        results.zebra_stripes = True
        results.add_columns("Code", "Name", "Price")

        queue = self.query_one("#table-queue", DataTable)
        queue.cursor_type = "row"
        queue.add_columns("Name", "Qty")

        self.refresh_results()
        self.refresh_queue()
        self.query_one("#input-search").focus()

    @on(ScreenResume)
    def handle_resume(self):
        self.refresh_results()
        self.refresh_queue()

    # ---------------------------
    # Search
    # ---------------------------

    @on(Input.Changed, "#input-search")
    def handle_query_changed(self, message: Input.Changed) -> None:
        if message.value != self.app.state.search.query:
            self.app.state.search.set_query(message.value)

    @on(Input.Submitted, "#input-search")
    @on(Button.Pressed, "#btn-search")
    @work(exclusive=True, group="search")
    async def handle_search_submit(self) -> None:
        query = self.query_one("#input-search", Input).value
        try:
            await self.app.state.search.submit(query)
        except SearchFailed as e:
            self.notify(f"Search failed: {e}", severity="error")

    @on(SearchFailedMessage)
    def handle_search_failed(self, message: SearchFailedMessage) -> None:
        self.notify(f"Search failed: {message.error}", severity="error")

    @on(SearchChangedMessage)
    def refresh_results(self) -> None:
        search = self.app.state.search
        page = search.visible_page()

        search_input = self.query_one("#input-search", Input)
        if search_input.value != search.query:
            with search_input.prevent(Input.Changed):
                search_input.value = search.query

        table = self.query_one("#table-results", DataTable)
        if page.items != self._visible:
            self._visible = list(page.items)
            table.clear()
            for p in self._visible:
                table.add_row(p.code, p.name, p.price)

        self.query_one("#label-search-status", Label).update(STATUS_TEXT[search.state])
        self.query_one("#label-page", Label).update(
            f"Page {page.page} of {page.total_pages}"
        )
        self.query_one("#btn-prev", Button).disabled = not page.has_prev
        self.query_one("#btn-next", Button).disabled = not page.has_next

    @on(Button.Pressed, "#btn-prev")
    def handle_prev_page(self) -> None:
        self.app.state.search.prev_page()

    @on(Button.Pressed, "#btn-next")
    def handle_next_page(self) -> None:
        self.app.state.search.next_page()

    # ---------------------------
    # Quantities and queue
    # ---------------------------

    def _highlighted_product(self) -> Optional[NormalizedProduct]:
        table = self.query_one("#table-results", DataTable)
        if not self._visible or not 0 <= table.cursor_row < len(self._visible):
            return None
        return self._visible[table.cursor_row]

    @on(DataTable.RowHighlighted, "#table-results")
    def handle_row_highlighted(self) -> None:
        product = self._highlighted_product()
        if product is not None:
            qty_input = self.query_one("#input-qty", Input)
            with qty_input.prevent(Input.Changed):
                qty_input.value = self.app.state.queue.pending_quantity(product.id)

    @on(Input.Changed, "#input-qty")
    def handle_qty_changed(self, message: Input.Changed) -> None:
        product = self._highlighted_product()
        if product is not None:
            self.app.state.queue.set_pending_quantity(product.id, message.value)

    @on(DataTable.RowSelected, "#table-results")
    @on(Button.Pressed, "#btn-add")
    def handle_add(self) -> None:
        product = self._highlighted_product()
        if product is None:
            return
        qty_input = self.query_one("#input-qty", Input)
        if self.app.state.queue.add_to_queue(product, qty_input.value) is not None:
            with qty_input.prevent(Input.Changed):
                qty_input.value = "1"

    @on(Button.Pressed, "#btn-remove")
    def handle_remove(self) -> None:
        table = self.query_one("#table-queue", DataTable)
        if table.row_count:
            self.app.state.queue.remove_from_queue(table.cursor_row)

    @on(Button.Pressed, "#btn-reset")
    def handle_reset(self) -> None:
        self.app.state.reset()

    @on(QueueChangedMessage)
    def refresh_queue(self) -> None:
        queue = self.app.state.queue
        table = self.query_one("#table-queue", DataTable)
        table.clear()
        for item in queue.items:
            table.add_row(item.name, str(item.qty))

        has_items = len(queue) > 0
        table.display = has_items
        self.query_one("#label-queue-empty").display = not has_items

        btn_print = self.query_one("#btn-print", Button)
        btn_print.label = f"Print {queue.total_label_count()} Labels"
        btn_print.disabled = not has_items or queue.is_printing
        self.query_one("#btn-remove", Button).disabled = not has_items

    @on(Button.Pressed, "#btn-print")
    @work(exclusive=True, group="print")
    async def handle_print(self) -> None:
        try:
            label_cnt = await self.app.state.queue.print()
        except PrintFailed as e:
            self.notify(f"Print failed: {e}", severity="error")
            return
        if label_cnt:
            self.notify(f"Sent {label_cnt} labels to the printer.")
