"""Protocol definitions for the socket-like objects the engine talks to."""

from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """Protocol for a connected stream socket (socket.socket)."""

    def sendall(self, data: bytes) -> None:
        raise NotImplementedError

    def makefile(self, mode: str = "r") -> BinaryIO:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError
