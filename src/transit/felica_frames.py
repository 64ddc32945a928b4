#file to build/parse FeliCa "Read Without Encryption" frames
#the byte layout of the service code and block list differs between tags,
#so both are built for a given encoding variant (see transit_card)
from transit.transit_card import BLOCK_SIZE

#FeliCa command and response codes
CMD_READ_WO_ENC = 0x06
RESP_READ_WO_ENC = 0x07
#length of the card's IDm
IDM_SIZE = 8


#encode a 16-bit service code in the given byte order
#"le" is the order in the FeliCa standard, "be" is what some tags expect
def encode_service_code(code, mode):
    if mode == "le":
        return bytes([code & 0xFF, (code >> 8) & 0xFF])
    if mode == "be":
        return bytes([(code >> 8) & 0xFF, code & 0xFF])
    raise ValueError(f"unknown service code mode: {mode}")


#encode the block list for count blocks starting at start
#"short" is the 2 byte element (0x80 flag + 8-bit block number)
#"long" is the 3 byte element (16-bit little endian block number)
#all blocks belong to the first (only) service in the frame
def encode_block_list(start, count, mode):
    b = bytearray()
    for block in range(start, start + count):
        if mode == "short":
            b += bytes([0x80, block & 0xFF])
        elif mode == "long":
            b += bytes([0x00, block & 0xFF, (block >> 8) & 0xFF])
        else:
            raise ValueError(f"unknown block list mode: {mode}")
    return bytes(b)


#function to build the full command frame (length byte first)
def build_read_frame(idm, service_code, service_mode, block_list_mode, start, count):
    if len(idm) != IDM_SIZE:
        raise ValueError(f"IDm must be exactly {IDM_SIZE} bytes")
    body = bytearray([CMD_READ_WO_ENC])
    body += bytes(idm)
    #one service
    body.append(1)
    body += encode_service_code(service_code, service_mode)
    body.append(count & 0xFF)
    body += encode_block_list(start, count, block_list_mode)
    #length includes the length byte itself
    return bytes([len(body) + 1]) + bytes(body)


#function to check a card response and pull out the block data
#response layout: len, 0x07, IDm(8), status1, status2, block count, data
#returns (ok, data)
def parse_read_response(resp, count):
    if not resp or len(resp) < 13:
        return False, b""
    if resp[1] != RESP_READ_WO_ENC:
        return False, b""
    #both status flags must be 0 for a good read
    if resp[10] != 0x00 or resp[11] != 0x00:
        return False, b""
    if resp[12] != count:
        return False, b""
    data = bytes(resp[13:13 + count * BLOCK_SIZE])
    if len(data) != count * BLOCK_SIZE:
        return False, b""
    return True, data


#function to unwrap the PN532 InDataExchange answer around a card response
#first byte is the PN532 status, lower 6 bits are the error code
def parse_exchange_response(response, count):
    if not response or (response[0] & 0x3F) != 0x00:
        return False, b""
    return parse_read_response(response[1:], count)
