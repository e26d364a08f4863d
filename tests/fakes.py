# in-memory stand-ins for the backend and the session store
import asyncio
from typing import Any, Dict, List, Optional

from core.models import Session


class FakeBackend:
    def __init__(self) -> None:
        self.login_response: Any = {"token": "tok-1", "user": {"name": "alice"}}
        self.login_error: Optional[Exception] = None
        self.login_gate: Optional[asyncio.Event] = None
        self.login_calls: List[tuple] = []

        self.search_results: Dict[str, list] = {}
        self.search_errors: Dict[str, Exception] = {}
        self.search_gates: Dict[str, asyncio.Event] = {}
        self.search_calls: List[tuple] = []

        self.print_error: Optional[Exception] = None
        self.print_gate: Optional[asyncio.Event] = None
        self.printed: List[list] = []

        self.locations: Any = []
        self.locations_error: Optional[Exception] = None

    async def fetch_locations(self) -> Any:
        if self.locations_error is not None:
            raise self.locations_error
        return self.locations

    async def login(self, username, password, location):
        self.login_calls.append((username, password, location))
        if self.login_gate is not None:
            await self.login_gate.wait()
        if self.login_error is not None:
            raise self.login_error
        return self.login_response

    async def search_products(self, term, token):
        self.search_calls.append((term, token, asyncio.get_running_loop().time()))
        gate = self.search_gates.get(term)
        if gate is not None:
            await gate.wait()
        if term in self.search_errors:
            raise self.search_errors[term]
        return self.search_results.get(term, [])

    async def print_labels(self, items):
        if self.print_gate is not None:
            await self.print_gate.wait()
        if self.print_error is not None:
            raise self.print_error
        self.printed.append(list(items))
        return "Success"

    async def aclose(self) -> None:
        pass


class MemoryStore:
    def __init__(self, session: Optional[Session] = None) -> None:
        self.saved = session or Session()
        self.clear_cnt = 0
        self.load_error: Optional[Exception] = None
        self.save_error: Optional[Exception] = None
        self.clear_error: Optional[Exception] = None

    async def load(self) -> Session:
        if self.load_error is not None:
            raise self.load_error
        return self.saved

    async def save(self, session: Session) -> None:
        if self.save_error is not None:
            raise self.save_error
        self.saved = session

    async def clear(self) -> None:
        if self.clear_error is not None:
            raise self.clear_error
        self.saved = Session()
        self.clear_cnt += 1


def product_records(cnt: int, prefix: str = "P") -> List[dict]:
    return [
        {"id": i, "prod_code": f"{prefix}{i:03d}", "prod_name": f"Item {i}", "selling_price": i}
        for i in range(1, cnt + 1)
    ]
