"""Facade binding the operation catalog to one node port."""

from __future__ import annotations

from typing import Optional

import catalog
from catalog import Operation
from executor import RequestExecutor, default_executor
from utils.types import CancellationHandle


class BoardsClient:
    """Call node operations on a fixed port through a shared executor.

    Example:
        node = BoardsClient(7410)
        with Context.with_timeout(5) as ctx:
            raw = await node.get_threads(ctx, board="03a1...")
    """

    def __init__(self, port: int, executor: Optional[RequestExecutor] = None) -> None:
        self.executor = executor or default_executor()
        self.port = RequestExecutor.validate_port(port)

    async def call(
        self, ctx: CancellationHandle, operation: Operation, **params: Optional[str]
    ) -> bytes:
        """Execute any catalog operation with keyword parameters."""
        fn = catalog.gen(operation, params)
        return await fn(ctx, self.port, executor=self.executor)

    async def get_boards(self, ctx: CancellationHandle) -> bytes:
        """List subscribed boards."""
        return await catalog.get_boards()(ctx, self.port, executor=self.executor)

    async def new_board(
        self,
        ctx: CancellationHandle,
        name: Optional[str] = None,
        description: Optional[str] = None,
        submission_addresses: Optional[str] = None,
        seed: Optional[str] = None,
    ) -> bytes:
        """Create a board."""
        fn = catalog.new_board(name, description, submission_addresses, seed)
        return await fn(ctx, self.port, executor=self.executor)

    async def remove_board(self, ctx: CancellationHandle, board: Optional[str] = None) -> bytes:
        """Remove a board."""
        return await catalog.remove_board(board)(ctx, self.port, executor=self.executor)

    async def get_boardpage(self, ctx: CancellationHandle, board: Optional[str] = None) -> bytes:
        """Fetch a board page."""
        return await catalog.get_boardpage(board)(ctx, self.port, executor=self.executor)

    async def get_threads(self, ctx: CancellationHandle, board: Optional[str] = None) -> bytes:
        """List threads of a board."""
        return await catalog.get_threads(board)(ctx, self.port, executor=self.executor)

    async def new_thread(
        self,
        ctx: CancellationHandle,
        board: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> bytes:
        """Create a thread."""
        fn = catalog.new_thread(board, name, description)
        return await fn(ctx, self.port, executor=self.executor)

    async def remove_thread(
        self,
        ctx: CancellationHandle,
        board: Optional[str] = None,
        thread: Optional[str] = None,
    ) -> bytes:
        """Remove a thread."""
        return await catalog.remove_thread(board, thread)(ctx, self.port, executor=self.executor)

    async def get_threadpage(
        self,
        ctx: CancellationHandle,
        board: Optional[str] = None,
        thread: Optional[str] = None,
    ) -> bytes:
        """Fetch a thread page."""
        return await catalog.get_threadpage(board, thread)(ctx, self.port, executor=self.executor)

    async def get_posts(
        self,
        ctx: CancellationHandle,
        board: Optional[str] = None,
        thread: Optional[str] = None,
    ) -> bytes:
        """List posts of a thread."""
        return await catalog.get_posts(board, thread)(ctx, self.port, executor=self.executor)

    async def new_post(  # pylint: disable=too-many-arguments
        self,
        ctx: CancellationHandle,
        board: Optional[str] = None,
        thread: Optional[str] = None,
        title: Optional[str] = None,
        body: Optional[str] = None,
    ) -> bytes:
        """Create a post."""
        fn = catalog.new_post(board, thread, title, body)
        return await fn(ctx, self.port, executor=self.executor)

    async def remove_post(
        self,
        ctx: CancellationHandle,
        board: Optional[str] = None,
        thread: Optional[str] = None,
        post: Optional[str] = None,
    ) -> bytes:
        """Remove a post."""
        fn = catalog.remove_post(board, thread, post)
        return await fn(ctx, self.port, executor=self.executor)

    async def import_thread(
        self,
        ctx: CancellationHandle,
        from_board: Optional[str] = None,
        thread: Optional[str] = None,
        to_board: Optional[str] = None,
    ) -> bytes:
        """Copy a thread between boards."""
        fn = catalog.import_thread(from_board, thread, to_board)
        return await fn(ctx, self.port, executor=self.executor)
