"""MoveRegion: move a region to a different region server."""

from dataclasses import dataclass

from hbaserpc.call import BaseCall, Option, OptionError, apply_options
from hbaserpc.messages import RegionSpecifier, RegionSpecifierType

_MAX_UINT32 = 2**32 - 1
_MAX_UINT64 = 2**64 - 1


@dataclass
class ServerName:
    host_name: str | None = None
    port: int | None = None
    start_code: int | None = None


@dataclass
class MoveRegionRequest:
    region: RegionSpecifier | None = None
    dest_server_name: ServerName | None = None


@dataclass
class MoveRegionResponse:
    pass


def _parse_unsigned(text: str, limit: int) -> int:
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    number = int(text)
    if number > limit:
        raise ValueError(f"parsing {text!r}: value out of range")
    return number


class MoveRegion(BaseCall):
    """Move a region, given by its encoded name, to another region server."""

    rpc_name = "MoveRegion"
    response_type = MoveRegionResponse

    def __init__(self, region_name: bytes, *args: Option) -> None:
        super().__init__()
        self.req = MoveRegionRequest(
            region=RegionSpecifier(
                type=RegionSpecifierType.ENCODED_REGION_NAME,
                value=region_name,
            )
        )
        apply_options(self, args)

    def to_proto(self) -> MoveRegionRequest:
        """The MoveRegionRequest message."""
        return self.req

    def new_response(self) -> MoveRegionResponse:
        """An empty MoveRegionResponse."""
        return MoveRegionResponse()


def with_destination_region_server(server_name: str) -> Option:
    """Move the region to the server named "<host>,<port>,<startcode>"."""

    def apply(call: BaseCall) -> None:
        if not isinstance(call, MoveRegion):
            raise OptionError(
                "WithDestinationRegionServer option can only be used with MoveRegion")
        parts = server_name.split(",", 2)
        if len(parts) != 3:
            raise OptionError(
                "invalid server name, needs to be of format <host>,<port>,<startcode>")
        host, port_text, start_code_text = parts
        try:
            port = _parse_unsigned(port_text, _MAX_UINT32)
        except ValueError as exc:
            raise OptionError(f"failed to parse port: {exc}") from exc
        try:
            start_code = _parse_unsigned(start_code_text, _MAX_UINT64)
        except ValueError as exc:
            raise OptionError(f"failed to parse startcode: {exc}") from exc
        call.req.dest_server_name = ServerName(
            host_name=host, port=port, start_code=start_code)

    return apply