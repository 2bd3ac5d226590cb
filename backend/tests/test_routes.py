"""
Pokedex API — HTTP Route Tests
===============================

What:  End-to-end requests through the app: middleware, translation layer,
       services, exception handlers and the commit/rollback dependency.

What we test:
    ✅ Status codes: 200 / 201 / 404 / 409 / 422
    ✅ Responses are camelCase; `poke_type` is exposed as `type`
    ✅ Flat and nested request bodies both work
    ✅ 422 payloads use external field names (type, imageUrl, moves)
    ✅ A failed write leaves nothing behind
"""

from unittest.mock import patch

import pytest

from pokedex_api.exceptions import ValidationFailed
from pokedex_api.models import DEFAULT_ITEM_IMAGES, UNKNOWN_IMAGE_URL
from pokedex_api.models.poke_move import DUPLICATE_MOVE_MESSAGE
from pokedex_api.services.associations import association_manager


async def create(client, payload):
    response = await client.post("/api/pokemon", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestPokemonRoutes:

    @pytest.mark.asyncio
    async def test_types(self, test_client):
        response = await test_client.get("/api/pokemon/types")

        assert response.status_code == 200
        types = response.json()
        assert types == sorted(types)
        assert "fire" in types

    @pytest.mark.asyncio
    async def test_create_returns_camel_case_detail(self, test_client, pokemon_payload):
        response = await test_client.post("/api/pokemon", json=pokemon_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["type"] == "electric"
        assert "pokeType" not in body
        assert body["imageUrl"] == UNKNOWN_IMAGE_URL
        assert body["captured"] is False
        assert body["moves"] == ["quick attack", "thunder shock"]
        assert body["items"] == []
        assert "createdAt" in body and "updatedAt" in body
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_nested_snake_case_body(self, test_client, pokemon_payload):
        nested = {
            "pokemon": {
                "number": 1,
                "name": "Bulbasaur",
                "attack": 49,
                "defense": 49,
                "type": "grass",
                "image_url": "bulbasaur.svg",
                "captured": True,
                "moves": ["vine whip"],
            }
        }

        body = await create(test_client, nested)

        assert body["name"] == "Bulbasaur"
        assert body["imageUrl"] == "bulbasaur.svg"

    @pytest.mark.asyncio
    async def test_index_and_show(self, test_client, pokemon_payload):
        created = await create(test_client, pokemon_payload)

        index = await test_client.get("/api/pokemon")
        show = await test_client.get(f"/api/pokemon/{created['id']}")

        assert index.status_code == 200
        assert index.json() == [{
            "id": created["id"],
            "number": 25,
            "name": "Pikachu",
            "imageUrl": UNKNOWN_IMAGE_URL,
            "captured": False,
        }]
        assert show.status_code == 200
        assert show.json()["moves"] == ["quick attack", "thunder shock"]

    @pytest.mark.asyncio
    async def test_show_unknown(self, test_client):
        response = await test_client.get("/api/pokemon/999")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_validation_payload(self, test_client, pokemon_payload):
        pokemon_payload.update(type="plasma", imageUrl="", moves=[])

        response = await test_client.post("/api/pokemon", json=pokemon_payload)

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["errors"] == {
            "type": ["'plasma' is not a valid Pokemon type"],
            "imageUrl": ["can't be blank"],
            "moves": ["can't be blank"],
        }
        assert body["requestId"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_duplicate_number_leaves_no_side_effects(self, test_client, pokemon_payload):
        await create(test_client, pokemon_payload)
        pokemon_payload.update(name="Pichu", moves=["charm"])

        response = await test_client.post("/api/pokemon", json=pokemon_payload)

        assert response.status_code == 422
        assert response.json()["errors"] == {"number": ["'25' is already in use"]}
        moves = (await test_client.get("/api/moves")).json()
        assert "charm" not in [move["name"] for move in moves]

    @pytest.mark.asyncio
    async def test_update_capture_reveals_image(self, test_client, pokemon_payload):
        created = await create(test_client, pokemon_payload)

        response = await test_client.patch(
            f"/api/pokemon/{created['id']}", json={"captured": True, "moves": ["thunderbolt"]}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["imageUrl"] == "pikachu.svg"
        assert body["moves"] == ["thunderbolt"]

    @pytest.mark.asyncio
    async def test_put_is_an_update(self, test_client, pokemon_payload):
        created = await create(test_client, pokemon_payload)

        response = await test_client.put(f"/api/pokemon/{created['id']}", json={"attack": 100})

        assert response.status_code == 200
        assert response.json()["attack"] == 100

    @pytest.mark.asyncio
    async def test_non_object_body(self, test_client):
        response = await test_client.post("/api/pokemon", json=["not", "an", "object"])

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_list_as_type_is_a_field_error(self, test_client, pokemon_payload):
        pokemon_payload["type"] = ["fire"]

        response = await test_client.post("/api/pokemon", json=pokemon_payload)

        assert response.status_code == 422
        assert response.json()["errors"] == {"type": ["'['fire']' is not a valid Pokemon type"]}

    @pytest.mark.asyncio
    async def test_object_as_image_url_is_a_field_error(self, test_client, pokemon_payload):
        pokemon_payload["imageUrl"] = {"src": "x.svg"}

        response = await test_client.post("/api/pokemon", json=pokemon_payload)

        assert response.status_code == 422
        assert response.json()["errors"] == {"imageUrl": ["must be a string"]}

    @pytest.mark.asyncio
    async def test_number_beyond_column_range(self, test_client, pokemon_payload):
        pokemon_payload["number"] = 3000000000

        response = await test_client.post("/api/pokemon", json=pokemon_payload)

        assert response.status_code == 422
        assert response.json()["errors"] == {
            "number": ["'3000000000' must be less than or equal to 2147483647"]
        }

    @pytest.mark.asyncio
    async def test_failed_move_reassignment_undoes_scalar_update(self, test_client, pokemon_payload):
        """Attack and the new move are flushed before the failure; none of it is kept."""
        created = await create(test_client, pokemon_payload)
        assign_moves = association_manager.assign_moves

        async def assign_then_fail(db, pokemon, names):
            await assign_moves(db, pokemon, names)
            raise ValidationFailed({"moves": [DUPLICATE_MOVE_MESSAGE]})

        with patch.object(association_manager, "assign_moves", assign_then_fail):
            response = await test_client.patch(
                f"/api/pokemon/{created['id']}", json={"attack": 90, "moves": ["thunderbolt"]}
            )

        assert response.status_code == 422
        detail = (await test_client.get(f"/api/pokemon/{created['id']}")).json()
        assert detail["attack"] == 55
        assert detail["moves"] == ["quick attack", "thunder shock"]
        moves = (await test_client.get("/api/moves")).json()
        assert "thunderbolt" not in [move["name"] for move in moves]

    @pytest.mark.asyncio
    async def test_delete_cascades(self, test_client, pokemon_payload, item_payload):
        created = await create(test_client, pokemon_payload)
        await test_client.post(f"/api/pokemon/{created['id']}/items", json=item_payload)

        response = await test_client.delete(f"/api/pokemon/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"id": created["id"]}
        assert (await test_client.get(f"/api/pokemon/{created['id']}")).status_code == 404
        assert (await test_client.get(f"/api/pokemon/{created['id']}/items")).status_code == 404


class TestItemRoutes:

    @pytest.mark.asyncio
    async def test_create_and_list(self, test_client, pokemon_payload, item_payload):
        pokemon = await create(test_client, pokemon_payload)

        created = await test_client.post(f"/api/pokemon/{pokemon['id']}/items", json=item_payload)
        listed = await test_client.get(f"/api/pokemon/{pokemon['id']}/items")

        assert created.status_code == 201
        item = created.json()
        assert item["pokemonId"] == pokemon["id"]
        assert item["imageUrl"] == "oran_berry.svg"
        assert listed.status_code == 200
        assert [i["id"] for i in listed.json()] == [item["id"]]

    @pytest.mark.asyncio
    async def test_items_appear_in_pokemon_detail(self, test_client, pokemon_payload, item_payload):
        pokemon = await create(test_client, pokemon_payload)
        await test_client.post(f"/api/pokemon/{pokemon['id']}/items", json={"item": item_payload})

        detail = (await test_client.get(f"/api/pokemon/{pokemon['id']}")).json()

        assert [item["name"] for item in detail["items"]] == ["Oran Berry"]

    @pytest.mark.asyncio
    async def test_default_image(self, test_client, pokemon_payload, item_payload):
        pokemon = await create(test_client, pokemon_payload)
        del item_payload["imageUrl"]

        response = await test_client.post(f"/api/pokemon/{pokemon['id']}/items", json=item_payload)

        assert response.status_code == 201
        assert response.json()["imageUrl"] in DEFAULT_ITEM_IMAGES

    @pytest.mark.asyncio
    async def test_create_for_unknown_pokemon(self, test_client, item_payload):
        response = await test_client.post("/api/pokemon/999/items", json=item_payload)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_values_are_field_errors(self, test_client, pokemon_payload, item_payload):
        pokemon = await create(test_client, pokemon_payload)
        item_payload.update(imageUrl=["a.svg"], happiness=-3000000000, pokemonId=9999999999)

        response = await test_client.post(f"/api/pokemon/{pokemon['id']}/items", json=item_payload)

        assert response.status_code == 422
        assert response.json()["errors"] == {
            "imageUrl": ["must be a string"],
            "happiness": ["'-3000000000' must be greater than or equal to -2147483648"],
        }

    @pytest.mark.asyncio
    async def test_moving_to_out_of_range_pokemon_id(self, test_client, pokemon_payload, item_payload):
        pokemon = await create(test_client, pokemon_payload)
        item = (await test_client.post(f"/api/pokemon/{pokemon['id']}/items", json=item_payload)).json()

        response = await test_client.patch(f"/api/items/{item['id']}", json={"pokemonId": 9999999999})

        assert response.status_code == 422
        assert response.json()["errors"] == {"pokemon": ["must exist"]}

    @pytest.mark.asyncio
    async def test_update_and_delete(self, test_client, pokemon_payload, item_payload):
        pokemon = await create(test_client, pokemon_payload)
        item = (await test_client.post(f"/api/pokemon/{pokemon['id']}/items", json=item_payload)).json()

        updated = await test_client.patch(f"/api/items/{item['id']}", json={"happiness": 10})
        invalid = await test_client.patch(f"/api/items/{item['id']}", json={"price": -5})
        deleted = await test_client.delete(f"/api/items/{item['id']}")
        missing = await test_client.delete(f"/api/items/{item['id']}")

        assert updated.status_code == 200
        assert updated.json()["happiness"] == 10
        assert invalid.status_code == 422
        assert invalid.json()["errors"] == {"price": ["'-5' must be greater than or equal to 0"]}
        assert deleted.status_code == 200
        assert deleted.json() == {"id": item["id"]}
        assert missing.status_code == 404


class TestMoveRoutes:

    @pytest.mark.asyncio
    async def test_list_and_show(self, test_client, pokemon_payload):
        pokemon = await create(test_client, pokemon_payload)

        moves = (await test_client.get("/api/moves")).json()
        assert [move["name"] for move in moves] == ["quick attack", "thunder shock"]

        detail = await test_client.get(f"/api/moves/{moves[0]['id']}")
        assert detail.status_code == 200
        assert [p["id"] for p in detail.json()["pokemon"]] == [pokemon["id"]]

    @pytest.mark.asyncio
    async def test_delete_blocked_while_known(self, test_client, pokemon_payload):
        pokemon = await create(test_client, pokemon_payload)
        moves = {m["name"]: m["id"] for m in (await test_client.get("/api/moves")).json()}

        blocked = await test_client.delete(f"/api/moves/{moves['thunder shock']}")
        await test_client.patch(f"/api/pokemon/{pokemon['id']}", json={"moves": ["quick attack"]})
        allowed = await test_client.delete(f"/api/moves/{moves['thunder shock']}")

        assert blocked.status_code == 409
        assert blocked.json()["error"] == "integrity_violation"
        assert allowed.status_code == 200
        assert (await test_client.get(f"/api/moves/{moves['thunder shock']}")).status_code == 404


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert "uptimeSeconds" in body

    @pytest.mark.asyncio
    async def test_health_is_not_prefixed(self, test_client):
        assert (await test_client.get("/api/health")).status_code == 404
