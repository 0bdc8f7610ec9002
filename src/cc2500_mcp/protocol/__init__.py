"""Protocol layer: packet framing, CRC trailer, and command builders."""

from .framing import Packet, build_frame, parse_frame, serialize_packet
from .commands import Action, CommandID, WriteRegisterFrame, build_command
