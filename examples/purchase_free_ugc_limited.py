from roboat import Client
import os

# Replace this value with the item id of the item you want to purchase.
ITEM_ID = 13119979433
# Replace this value if you want to purchase a non-free item.
PRICE = 0

if __name__ == "__main__":
    client = Client(roblosecurity=os.getenv("ROBOAT_ROBLOSECURITY"))

    collectible_item_id = client.catalog.collectible_item_id(item_id=ITEM_ID)

    collectible_product_id = client.bedev2.collectible_product_id(
        collectible_item_id=collectible_item_id
    )
    collectible_creator_id = client.bedev2.collectible_creator_id(
        collectible_item_id=collectible_item_id
    )

    client.bedev2.purchase_non_tradable_limited(
        collectible_item_id=collectible_item_id,
        collectible_product_id=collectible_product_id,
        collectible_seller_id=collectible_creator_id,
        price=PRICE,
    )

    print(f"Purchased item {ITEM_ID} for {PRICE} robux!")
