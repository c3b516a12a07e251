from .endpoints.economy import Listing, UserSale
from typing import List
import pandas as pd


def resellers_to_dataframe(
    listings: List[Listing]
) -> pd.DataFrame:
    """
    Convert resale listings into a pandas DataFrame, cheapest first.

    Parameters
    ----------
    listings : list of Listing
        Listings as returned by `EconomyAPI.resellers`, possibly gathered
        over several pages.

    Returns
    -------
    pandas.DataFrame
        A DataFrame with the schema:
        ['uaid', 'seller_id', 'seller_name', 'price', 'serial_number'].
        `serial_number` is a nullable integer column, since only some
        limiteds are numbered.
    """
    columns = ["uaid", "seller_id", "seller_name", "price", "serial_number"]

    df = pd.DataFrame(
        [
            {
                "uaid": listing.uaid,
                "seller_id": listing.seller_id,
                "seller_name": listing.seller_name,
                "price": listing.price,
                "serial_number": listing.serial_number,
            }
            for listing in listings
        ],
        columns=columns,
    )

    # Enforce dtypes
    df = df.astype({
        "uaid": "int64",
        "seller_id": "int64",
        "seller_name": "string",
        "price": "int64",
        "serial_number": "Int64",
    })

    return df.sort_values("price", kind="stable").reset_index(drop=True)


def sales_to_dataframe(
    sales: List[UserSale]
) -> pd.DataFrame:
    """
    Convert sales of the authenticated user into a pandas DataFrame.

    The `created_at` timestamp is split into `date` and `time` string
    columns, like most spreadsheet exports expect.

    Parameters
    ----------
    sales : list of UserSale
        Sales as returned by `EconomyAPI.user_sales`.

    Returns
    -------
    pandas.DataFrame
        A DataFrame with the schema:
        ['date', 'time', 'sale_id', 'asset_id', 'asset_name', 'user_id',
         'username', 'robux_received', 'is_pending'].
    """
    df = pd.DataFrame(
        [
            {
                "timestamp": s.created_at,
                "sale_id": s.sale_id,
                "asset_id": s.asset_id,
                "asset_name": s.asset_name,
                "user_id": s.user_id,
                "username": s.username,
                "robux_received": s.robux_received,
                "is_pending": s.is_pending,
            }
            for s in sales
        ],
        columns=[
            "timestamp", "sale_id", "asset_id", "asset_name", "user_id",
            "username", "robux_received", "is_pending",
        ],
    )

    # Extract date & time from timestamp
    ts = pd.to_datetime(df["timestamp"], utc=True)
    df["date"] = ts.dt.date.astype(str)
    df["time"] = ts.dt.time.astype(str)

    # Drop timestamp and reorder columns
    ordered_cols = [
        "date", "time", "sale_id", "asset_id", "asset_name", "user_id",
        "username", "robux_received", "is_pending"
    ]

    df = df[ordered_cols]

    df = df.astype({
        "sale_id": "int64",
        "asset_id": "int64",
        "user_id": "int64",
        "robux_received": "int64",
        "is_pending": "bool",
    })

    return df
