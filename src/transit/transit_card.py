#file to read the transaction history blocks from a FeliCa transit card
import time

#size of one card memory block in bytes
BLOCK_SIZE = 16
#number of history blocks kept by the card (block 0 is the newest)
NUM_BLOCKS = 20
#number of attempts per block before it is given up as blank
MAX_READ_RETRIES = 3
#delay between attempts (5ms)
RETRY_DELAY_S = 0.005

#encoding variants the transport understands
#service code byte order: little endian (A) or big endian (B)
SERVICE_MODES = ("le", "be")
#block list element: 2 byte element (A) or 3 byte element (B)
BLOCK_LIST_MODES = ("short", "long")

#zeroed block, same as the card's "nothing written here" pattern
BLANK_BLOCK = bytes(BLOCK_SIZE)


#bounded store for the raw blocks of one session
#pre-filled with blank blocks so unreadable positions stay blank
class BlockStore:
    def __init__(self, count=NUM_BLOCKS):
        #never hold more blocks than the card's history has
        if count < 1 or count > NUM_BLOCKS:
            raise ValueError(f"count must be between 1 and {NUM_BLOCKS}")
        self.count = count
        self.blocks = [BLANK_BLOCK] * count

    #store the data read for one position
    def put(self, index, data):
        if index < 0 or index >= self.count:
            raise ValueError(f"block index {index} out of range")
        if len(data) != BLOCK_SIZE:
            raise ValueError(f"Data must be exactly {BLOCK_SIZE} bytes")
        self.blocks[index] = bytes(data)

    def __len__(self):
        return self.count


#cache of the encoding variants the current card accepted
#None means unknown, a read has to go through discovery
class ModeCache:
    def __init__(self):
        self.service_mode = None
        self.block_list_mode = None

    def known(self):
        return self.service_mode is not None and self.block_list_mode is not None

    def remember(self, service_mode, block_list_mode):
        self.service_mode = service_mode
        self.block_list_mode = block_list_mode

    def clear(self):
        self.service_mode = None
        self.block_list_mode = None


#a read only counts if it returned a whole block
def good_read(ok, data):
    return ok and data is not None and len(data) >= BLOCK_SIZE


#try every service/block list combination in order A/A, A/B, B/A, B/B
#caches the first one that works and returns its data
def discover_modes(read_fn, cache, block):
    for sc_mode in SERVICE_MODES:
        for bl_mode in BLOCK_LIST_MODES:
            ok, data = read_fn(sc_mode, bl_mode, block, 1)
            if good_read(ok, data):
                cache.remember(sc_mode, bl_mode)
                print(f"[acq] block {block}: using service={sc_mode} block_list={bl_mode}")
                return data
    #no combination worked
    return None


#function to read one block a single time
#uses the cached modes first, falls back to discovery if they fail
def read_block_once(read_fn, cache, block):
    if cache.known():
        ok, data = read_fn(cache.service_mode, cache.block_list_mode, block, 1)
        if good_read(ok, data):
            return data
        #cached modes stopped working, forget them and rediscover
        cache.clear()
    return discover_modes(read_fn, cache, block)


#function to read a block with retries
#returns the block bytes, or None once all attempts failed
def read_block(read_fn, cache, block, attempts=MAX_READ_RETRIES):
    for attempt in range(attempts):
        data = read_block_once(read_fn, cache, block)
        if data is not None:
            return bytes(data[:BLOCK_SIZE])
        #wait a bit before retrying, but not after the last attempt
        if attempt < attempts - 1:
            time.sleep(RETRY_DELAY_S)
    return None


#function to read the whole history, one block at a time
#a bad block is left blank instead of losing the rest of the history
#returns (ok, store, missing) where ok is True if at least one block was read
def read_all_blocks(read_fn, cache, start_block=0, count=NUM_BLOCKS):
    store = BlockStore(count)
    missing = []
    for i in range(count):
        data = read_block(read_fn, cache, start_block + i)
        if data is None:
            missing.append(start_block + i)
            continue
        store.put(i, data)

    if missing:
        print(f"[acq] unreadable blocks left blank: {missing}")
    #only a total failure is reported to the caller
    ok = len(missing) < count
    return ok, store, missing
