#file to pack/unpack transit history blocks
#struct to pack/unpack integers to/from bytes
import struct

from transit.transit_card import BLOCK_SIZE

#transaction kinds, filled in by transit_history.derive_amounts
KIND_UNKNOWN = "unknown"
KIND_COMMUTE = "commute"
KIND_BALANCE_UPDATE = "balance_update"


#check if a block is erased (all 0x00) or never written (all 0xFF)
#a block of the wrong size can't be decoded either, treat it as blank
def is_blank(b):
    if not b or len(b) != BLOCK_SIZE:
        return True
    return all(x == 0x00 for x in b) or all(x == 0xFF for x in b)


#function to unpack one history block into a record dictionary
#amount and kind stay unset until the history is derived
def unpack_block(block_index, b):
    rec = {
        "block_index": block_index,
        "valid": False,
        "timestamp": 0,
        "from_station": 0,
        "to_station": 0,
        "balance": 0,
        "amount": None,
        "kind": KIND_UNKNOWN,
    }
    #blank blocks carry nothing else
    if is_blank(b):
        return rec

    rec["valid"] = True
    #timestamp (big endian 24-bit unsigned integer, bytes 4..6)
    #pad to 4 bytes so struct can read it
    rec["timestamp"] = struct.unpack(">I", b"\x00" + bytes(b[4:7]))[0]
    #entry and exit station codes (0 = no station)
    rec["from_station"] = b[8]
    rec["to_station"] = b[10]
    #balance after this transaction (little endian 24-bit unsigned integer, bytes 11..13)
    rec["balance"] = struct.unpack("<I", bytes(b[11:14]) + b"\x00")[0]
    return rec


#function to unpack every block, keeps the card's newest-first order
def parse_blocks(blocks):
    return [unpack_block(i, b) for i, b in enumerate(blocks)]


#function to pack a history block in the card's layout
#used to build test cards and bench data
def pack_block(timestamp, from_station, to_station, balance):
    b = bytearray(BLOCK_SIZE)
    #set timestamp (big endian 24-bit unsigned integer)
    b[4:7] = struct.pack(">I", timestamp & 0xFFFFFF)[1:]
    b[8] = from_station & 0xFF
    b[10] = to_station & 0xFF
    #set balance (little endian 24-bit unsigned integer)
    b[11:14] = struct.pack("<I", balance & 0xFFFFFF)[:3]
    return bytes(b)
