#file to talk to FeliCa cards through the PN532 over SPI
#provides the raw block read used by transit_card
import time
import board
import busio
#library to use GPIO as digital input/output
from digitalio import DigitalInOut

from adafruit_pn532.spi import PN532_SPI

from transit.felica_frames import build_read_frame, parse_exchange_response
from transit.transit_card import BLOCK_SIZE

#initialise chip select (NSS) and reset pins as digital pins
#on WaveShare PN532 in SPI, NSS is on BCM4 (board.D4)
CS_PIN   = DigitalInOut(board.D4)
#RSTPDN on BCM20 (board.D20)
RESET_PIN= DigitalInOut(board.D20)
#initialise SPI bus using Pi's SPI pins
spi = busio.SPI(board.SCK, board.MOSI, board.MISO)

#create instance of PN532 driver
pn = PN532_SPI(spi, CS_PIN, reset=RESET_PIN, debug=False)
#put PN532 into reader mode
pn.SAM_configuration()

#PN532 commands not wrapped by the driver
CMD_INLISTPASSIVETARGET = 0x4A
CMD_INDATAEXCHANGE = 0x40
#baud rate / modulation byte for FeliCa at 212 kbps
FELICA_212 = 0x01
#FeliCa polling: command 0x00, any system code (0xFFFF), request system code, 1 time slot
POLLING_PAYLOAD = [0x00, 0xFF, 0xFF, 0x01, 0x00]
#service holding the card's transaction history
HISTORY_SERVICE_CODE = 0x090F


#function to poll for a FeliCa card, returns its IDm or None
def poll_felica(timeout=0.2):
    try:
        #response: NbTg, Tg, POL_RES length, 0x01, IDm(8), PMm(8), system code(2)
        response = pn.call_function(
            CMD_INLISTPASSIVETARGET,
            params=[0x01, FELICA_212] + POLLING_PAYLOAD,
            response_length=22,
            timeout=timeout,
        )
    except RuntimeError as e:
        print(f"[pn532] polling error: {e}")
        return None
    #no card or unexpected answer
    if not response or response[0] != 1 or len(response) < 12:
        return None
    return bytes(response[4:12])


#function to return card's IDm or timeout after a set time
def wait_for_card(timeout=None, stable_read=1):
    t0 = time.time()
    last = None
    count = 0
    while True:
        idm = poll_felica(timeout=0.2)
        if idm:
            #if the IDm read is stable (same IDm read multiple times), return it
            if last is not None and idm == last:
                count += 1
            else:
                last = idm
                count = 1
            if count >= stable_read:
                return idm
        #if timeout is set and exceeded, return None
        if timeout and (time.time() - t0) > timeout:
            return None


#function to build the raw block read for one card
#returns read_fn(service_mode, block_list_mode, start_block, count) -> (ok, data)
def make_block_reader(idm, service_code=HISTORY_SERVICE_CODE):
    def read_fn(service_mode, block_list_mode, start_block, count):
        frame = build_read_frame(idm, service_code, service_mode, block_list_mode,
                                 start_block, count)
        try:
            #first param is the target number from InListPassiveTarget
            response = pn.call_function(
                CMD_INDATAEXCHANGE,
                params=[0x01] + list(frame),
                response_length=1 + 13 + count * BLOCK_SIZE,
            )
        except RuntimeError as e:
            print(f"[pn532] exchange error: {e}")
            return False, b""
        return parse_exchange_response(response, count)
    return read_fn


if __name__ == "__main__":
    #loop until a card is detected, then print its IDm
    print("Waiting for FeliCa card…")
    while True:
        idm = poll_felica(timeout=0.5)
        if idm:
            print("IDm:", idm.hex())
            break
