import argparse
#import card read functions
from transit.pn532_felica import wait_for_card, make_block_reader, HISTORY_SERVICE_CODE
from transit.transit_card import ModeCache
from transit.transit_session import run_session
from transit.transit_report import format_report
from transit.stations import StationLookup


#main function to inspect the card
def main():
    parser = argparse.ArgumentParser(description="Read and print the transaction history of a transit card")
    parser.add_argument("--stations", help="CSV file with code,name columns for station names")
    parser.add_argument("--service-code", type=lambda s: int(s, 0), default=HISTORY_SERVICE_CODE,
                        help="history service code (default 0x090F)")
    parser.add_argument("--timeout", type=float, default=30)
    args = parser.parse_args()

    stations = StationLookup(args.stations) if args.stations else None

    #wait for a card to be tapped and get its IDm
    print("Tap card to inspect...")
    idm = wait_for_card(timeout=args.timeout)
    if not idm:
        print("No card detected.")
        return

    #read and derive the history
    ok, records = run_session(make_block_reader(idm, args.service_code), ModeCache())
    if not ok:
        print("Read failed, try again.")
        return

    for line in format_report(idm, records, stations):
        print(line)

if __name__ == "__main__":
    main()
