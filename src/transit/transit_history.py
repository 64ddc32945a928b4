#file to work out amounts and kinds for the parsed history
import pandas as pd

from transit.transit_records import KIND_COMMUTE, KIND_BALANCE_UPDATE

#columns shown for each transaction
HISTORY_COLUMNS = ["block_index", "timestamp", "from_station", "to_station",
                   "amount", "kind", "balance"]


#find the closest valid record older than index i (higher index = older)
#linear scan, the history is at most 20 records so O(N^2) overall is fine
def next_valid_older(records, i):
    for rec in records[i + 1:]:
        if rec["valid"]:
            return rec
    return None


#decide if a record is a fare or a balance change
#a fare needs both stations and must not have increased the balance
#expects a record whose amount was already derived (not None)
def classify(rec):
    if rec["from_station"] == 0 or rec["to_station"] == 0:
        return KIND_BALANCE_UPDATE
    if rec["amount"] > 0:
        return KIND_BALANCE_UPDATE
    return KIND_COMMUTE


#fill in amount and kind for every valid record, in place
#amount is the change against the next older valid balance
#the oldest valid record has no "before" balance, so its amount is 0
def derive_amounts(records):
    for i, rec in enumerate(records):
        #invalid records keep their unset values
        if not rec["valid"]:
            continue
        older = next_valid_older(records, i)
        if older is not None:
            rec["amount"] = rec["balance"] - older["balance"]
        else:
            rec["amount"] = 0
        rec["kind"] = classify(rec)
    return records


#balance on the card right now, taken from the newest valid record
#returns None if there is no valid record (balance undeterminable)
def current_balance(records):
    for rec in records:
        if rec["valid"]:
            return rec["balance"]
    return None


#function to put the valid records into a dataframe, newest first
def history_frame(records):
    rows = [{col: rec[col] for col in HISTORY_COLUMNS} for rec in records if rec["valid"]]
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)
