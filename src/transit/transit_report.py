#functions to turn a derived history into printable lines
import datetime

from transit.transit_history import current_balance, history_frame

#the card's 24-bit timestamp counts minutes from this date
TS_EPOCH = datetime.datetime(2000, 1, 1)


#function to format timestamps for display
def format_ts(value):
    dt_from_ts = TS_EPOCH + datetime.timedelta(minutes=int(value))
    return dt_from_ts.strftime("%Y-%m-%d %H:%M")


#function to show an amount with its sign
def format_amount(amount):
    return f"{amount:+d}"


#function to build the report lines for one card, newest transaction first
def format_report(idm, records, stations=None):
    lines = [f"IDm: {idm.hex() if isinstance(idm, (bytes, bytearray)) else idm}"]

    balance = current_balance(records)
    if balance is None:
        lines.append("Balance: undeterminable (no history on card)")
        return lines
    lines.append(f"Balance: {balance}")

    df = history_frame(records)
    #look up station names if a table was given
    name = stations.get if stations is not None else (lambda c: str(c) if c else "-")
    lines.append("")
    lines.append(f"History ({len(df)} records, newest first):")
    for row in df.itertuples(index=False):
        lines.append(
            f"  {format_ts(row.timestamp)}  {row.kind:<14}  {format_amount(row.amount):>7}  "
            f"{name(row.from_station)} -> {name(row.to_station)}  balance={row.balance}"
        )
    return lines
