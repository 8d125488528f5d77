import json
from datetime import timedelta
from unittest.mock import MagicMock

from redis.exceptions import RedisError

from storefront.services.cart import CART_PREFIX, Cart, CartRepository, cart_item_key

from conftest import make_product, make_variant


def test_cart_item_key():
    assert cart_item_key("p1") == "p1"
    assert cart_item_key("p1", "v9") == "p1-v9"


def test_adding_same_product_twice_merges_quantities():
    cart = Cart()
    product = make_product(id="p1", base_price=100)
    cart.add(product, 2)
    cart.add(product, 3)
    assert len(cart.items) == 1
    assert cart.items[0].quantity == 5


def test_variants_get_their_own_lines():
    cart = Cart()
    product = make_product(id="p1", type="VARIABLE", base_price=100)
    cart.add(product, 1, make_variant(id="v1", price=80))
    cart.add(product, 1, make_variant(id="v2", price=90))
    cart.add(product, 1)
    assert [item.id for item in cart.items] == ["p1-v1", "p1-v2", "p1"]


def test_line_price_and_image_come_from_variant_when_present():
    product = make_product(
        base_price=100,
        images=[{"id": "i1", "url": "/p.jpg", "is_primary": True}],
    )
    variant = make_variant(price=75, images=[{"id": "i2", "url": "/v.jpg"}])
    item = Cart().add(product, 1, variant)
    assert item.price == 75
    assert item.image == "/v.jpg"


def test_line_falls_back_to_product_price_and_primary_image():
    product = make_product(
        base_price=None,
        images=[{"id": "a", "url": "/a.jpg"}, {"id": "b", "url": "/b.jpg", "is_primary": True}],
    )
    item = Cart().add(product, 1, make_variant(images=[]))
    assert item.image == "/b.jpg"
    plain = Cart().add(product)
    assert plain.price == 0
    assert plain.image == "/b.jpg"


def test_totals():
    cart = Cart()
    cart.add(make_product(id="a", base_price=10.5), 2)
    cart.add(make_product(id="b", base_price=4), 3)
    assert cart.total == 33
    assert cart.item_count == 5


def test_update_quantity_clamps_to_one_and_ignores_unknown_keys():
    cart = Cart()
    cart.add(make_product(id="a", base_price=1), 4)
    cart.update_quantity("a", 0)
    assert cart.get("a").quantity == 1
    cart.update_quantity("missing", 9)
    assert cart.item_count == 1


def test_remove_and_clear():
    cart = Cart()
    cart.add(make_product(id="a"))
    cart.add(make_product(id="b"))
    cart.remove("a")
    assert [item.id for item in cart.items] == ["b"]
    cart.clear()
    assert cart.items == []


def test_json_snapshot_round_trip_keeps_lines():
    cart = Cart()
    cart.add(make_product(id="a", base_price=5), 2, make_variant(id="v1", price=6))
    restored = Cart.from_json(cart.to_json())
    assert restored.items == cart.items


def test_from_json_tolerates_garbage():
    assert Cart.from_json(None).items == []
    assert Cart.from_json("not json").items == []
    assert Cart.from_json('{"a": 1}').items == []
    raw = json.dumps(
        [
            {"id": "a", "product_id": "a", "name": "A", "price": 1, "quantity": 1},
            {"id": "b", "quantity": "many"},
        ]
    )
    assert [item.id for item in Cart.from_json(raw).items] == ["a"]


def test_repository_saves_with_ttl_and_loads(memory_redis):
    repository = CartRepository(memory_redis, ttl=timedelta(hours=1))
    cart = Cart()
    cart.add(make_product(id="a", base_price=3))
    repository.save("abc", cart)
    assert f"{CART_PREFIX}abc" in memory_redis.data
    assert repository.load("abc").item_count == 1
    repository.delete("abc")
    assert repository.load("abc").items == []


def test_repository_passes_expiry_to_redis():
    client = MagicMock()
    CartRepository(client, ttl=timedelta(hours=2)).save("abc", Cart())
    client.set.assert_called_once_with(f"{CART_PREFIX}abc", "[]", ex=7200)


def test_repository_degrades_when_redis_is_down():
    client = MagicMock()
    client.get.side_effect = RedisError("down")
    client.set.side_effect = RedisError("down")
    client.delete.side_effect = RedisError("down")
    repository = CartRepository(client)
    assert repository.load("abc").items == []
    repository.save("abc", Cart())
    repository.delete("abc")
