import time
#import argparse to allow command line arguments
import argparse

#import helper functions from pn532_felica.py
from transit.pn532_felica import poll_felica, make_block_reader, HISTORY_SERVICE_CODE
from transit.transit_card import ModeCache
from transit.transit_session import run_session, Debounce, DEBOUNCE_S
from transit.transit_report import format_report
from transit.stations import StationLookup


#function to keep reading cards until stopped
#the mode cache lives for the whole run, so later cards skip discovery if they use the same encoding
def reader_loop(args):
    stations = StationLookup(args.stations) if args.stations else None
    cache = ModeCache()
    debounce = Debounce(window_s=args.debounce)

    print("\nWaiting for cards … (Ctrl+C to stop)")
    while True:
        idm = poll_felica(timeout=args.timeout)
        if not idm:
            continue
        #same card still on the reader
        if debounce.should_skip(idm, time.time()):
            continue

        ok, records = run_session(make_block_reader(idm, args.service_code), cache)
        #a failed session goes straight back to waiting
        if not ok:
            print("Read failed for", idm.hex())
            continue
        print()
        for line in format_report(idm, records, stations):
            print(line)

#main function to run the script
if __name__ == "__main__":
    #set up argument parser
    p = argparse.ArgumentParser()
    p.add_argument("--stations")
    p.add_argument("--debounce", type=float, default=DEBOUNCE_S)
    p.add_argument("--timeout", type=float, default=0.5)
    p.add_argument("--service-code", type=lambda s: int(s, 0), default=HISTORY_SERVICE_CODE)
    #parse the command line arguments
    args = p.parse_args()

    try:
        reader_loop(args)
    except KeyboardInterrupt:
        print("\nStopped.")
