#lookup table from station code to station name
import pandas as pd


#class to create station code -> name lookup table from a csv file
#the csv needs a "code" and a "name" column
class StationLookup:
    def __init__(self, source):
        #read csv as dataframe
        df = pd.read_csv(source, dtype={"name": str})
        #drop rows without a usable code
        df = df.dropna(subset=["code"])
        df["name"] = df["name"].fillna("")

        #create dictionary of code -> name
        self._map = {int(code): str(name).strip()
                     for code, name in zip(df["code"], df["name"])}

    def __len__(self):
        return len(self._map)

    #function to get the name for a station code
    def get(self, code):
        #0 means the record has no station
        if not code:
            return "-"
        return self._map.get(int(code), f"#{code}")
