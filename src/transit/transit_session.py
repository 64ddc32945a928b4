#file to run one card session: read blocks, parse, derive
from transit.transit_card import read_all_blocks, NUM_BLOCKS
from transit.transit_records import parse_blocks
from transit.transit_history import derive_amounts

#ignore the same card for this many seconds after it was last seen
DEBOUNCE_S = 3.0


#function to process one tapped card
#read_fn is the transport's raw block read, cache is the run's ModeCache
#returns (ok, records), ok is False only if no block could be read at all
def run_session(read_fn, cache, start_block=0, count=NUM_BLOCKS):
    ok, store, missing = read_all_blocks(read_fn, cache, start_block, count)
    if not ok:
        print(f"[session] no block could be read ({len(missing)} failed)")
        return False, []
    records = parse_blocks(store.blocks)
    derive_amounts(records)
    return True, records


#class to stop the same card being processed again straight away
#every sighting refreshes the time, so a card resting on the reader is read once
class Debounce:
    def __init__(self, window_s=DEBOUNCE_S):
        self.window = float(window_s)
        self.last_id = None
        self.last_ts = None

    #returns True if this card should be ignored
    def should_skip(self, card_id, now):
        skip = (
            card_id == self.last_id
            and self.last_ts is not None
            and (now - self.last_ts) < self.window
        )
        self.last_id = card_id
        self.last_ts = now
        return skip
