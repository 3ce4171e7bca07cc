"""Catalog of remote node operations and their client-function factories.

Every factory is pure: it only captures its arguments. Nothing touches the
network until the returned client function is awaited::

    fn = new_post("board-key", "thread-ref", "Title", "Body")
    payload = await fn(Context.with_timeout(10), 7410)

Parameters passed as ``None`` are left out of the request body entirely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple

from executor import RequestExecutor, default_executor
from utils.types import CancellationHandle, ClientFunc


class Operation(Enum):
    """Remote operations exposed by the node, with their parameter schema."""

    GET_BOARDS = ("get_boards", ())
    NEW_BOARD = ("new_board", ("name", "description", "submission_addresses", "seed"))
    REMOVE_BOARD = ("remove_board", ("board",))
    GET_BOARDPAGE = ("get_boardpage", ("board",))
    GET_THREADS = ("get_threads", ("board",))
    NEW_THREAD = ("new_thread", ("board", "name", "description"))
    REMOVE_THREAD = ("remove_thread", ("board", "thread"))
    GET_THREADPAGE = ("get_threadpage", ("board", "thread"))
    GET_POSTS = ("get_posts", ("board", "thread"))
    NEW_POST = ("new_post", ("board", "thread", "title", "body"))
    REMOVE_POST = ("remove_post", ("board", "thread", "post"))
    IMPORT_THREAD = ("import_thread", ("from_board", "thread", "to_board"))

    def __init__(self, path: str, params: Tuple[str, ...]) -> None:
        self.path = path
        self.params = params


@dataclass(frozen=True)
class OperationRequest:
    """An operation bound to the parameter values for one request."""

    operation: Operation
    params: Mapping[str, Optional[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        unknown = set(self.params) - set(self.operation.params)
        if unknown:
            raise ValueError(
                f"{self.operation.path} does not accept parameters: {sorted(unknown)}"
            )
        ordered = {name: self.params.get(name) for name in self.operation.params}
        object.__setattr__(self, "params", MappingProxyType(ordered))

    @property
    def path(self) -> str:
        """Server path of the bound operation."""
        return self.operation.path


def gen(operation: Operation, values: Optional[Mapping[str, Optional[str]]] = None) -> ClientFunc:
    """Build the client function for ``operation`` bound to ``values``."""
    request = OperationRequest(operation, dict(values or {}))

    async def client_func(
        ctx: CancellationHandle,
        port: int,
        *,
        executor: Optional[RequestExecutor] = None,
    ) -> bytes:
        runner = executor or default_executor()
        return await runner.execute(ctx, port, request.path, request.params)

    client_func.request = request  # type: ignore[attr-defined]
    client_func.__name__ = operation.path
    client_func.__qualname__ = operation.path
    return client_func


# --- boards -----------------------------------------------------------------


def get_boards() -> ClientFunc:
    """List the boards the node is subscribed to."""
    return gen(Operation.GET_BOARDS)


def new_board(
    name: Optional[str],
    description: Optional[str],
    submission_addresses: Optional[str],
    seed: Optional[str],
) -> ClientFunc:
    """Create a new board."""
    return gen(
        Operation.NEW_BOARD,
        {
            "name": name,
            "description": description,
            "submission_addresses": submission_addresses,
            "seed": seed,
        },
    )


def remove_board(board: Optional[str]) -> ClientFunc:
    """Remove a board."""
    return gen(Operation.REMOVE_BOARD, {"board": board})


def get_boardpage(board: Optional[str]) -> ClientFunc:
    """Fetch the page of the board with the given public key."""
    return gen(Operation.GET_BOARDPAGE, {"board": board})


# --- threads ----------------------------------------------------------------


def get_threads(board: Optional[str]) -> ClientFunc:
    """List the threads of a board."""
    return gen(Operation.GET_THREADS, {"board": board})


def new_thread(
    board: Optional[str],
    name: Optional[str],
    description: Optional[str],
) -> ClientFunc:
    """Create a thread on a board."""
    return gen(
        Operation.NEW_THREAD,
        {"board": board, "name": name, "description": description},
    )


def remove_thread(board: Optional[str], thread: Optional[str]) -> ClientFunc:
    return gen(Operation.REMOVE_THREAD, {"board": board, "thread": thread})


def get_threadpage(board: Optional[str], thread: Optional[str]) -> ClientFunc:
    """Fetch the page of a thread on a board."""
    return gen(Operation.GET_THREADPAGE, {"board": board, "thread": thread})


def import_thread(
    from_board: Optional[str],
    thread: Optional[str],
    to_board: Optional[str],
) -> ClientFunc:
    """Copy a thread from one board to another."""
    return gen(
        Operation.IMPORT_THREAD,
        {"from_board": from_board, "thread": thread, "to_board": to_board},
    )


# --- posts ------------------------------------------------------------------


def get_posts(board: Optional[str], thread: Optional[str]) -> ClientFunc:
    return gen(Operation.GET_POSTS, {"board": board, "thread": thread})


def new_post(
    board: Optional[str],
    thread: Optional[str],
    title: Optional[str],
    body: Optional[str],
) -> ClientFunc:
    """Create a post in a thread."""
    return gen(
        Operation.NEW_POST,
        {"board": board, "thread": thread, "title": title, "body": body},
    )


def remove_post(
    board: Optional[str],
    thread: Optional[str],
    post: Optional[str],
) -> ClientFunc:
    """Remove a post identified by board, thread and post reference."""
    return gen(Operation.REMOVE_POST, {"board": board, "thread": thread, "post": post})


FACTORIES: Mapping[Operation, Callable[..., ClientFunc]] = MappingProxyType(
    {
        Operation.GET_BOARDS: get_boards,
        Operation.NEW_BOARD: new_board,
        Operation.REMOVE_BOARD: remove_board,
        Operation.GET_BOARDPAGE: get_boardpage,
        Operation.GET_THREADS: get_threads,
        Operation.NEW_THREAD: new_thread,
        Operation.REMOVE_THREAD: remove_thread,
        Operation.GET_THREADPAGE: get_threadpage,
        Operation.GET_POSTS: get_posts,
        Operation.NEW_POST: new_post,
        Operation.REMOVE_POST: remove_post,
        Operation.IMPORT_THREAD: import_thread,
    }
)
