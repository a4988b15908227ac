from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi.testclient import TestClient

    from hearth_backend.game_logic import Player
    from hearth_backend.shared import ManualClock

    Seed = Callable[[Callable[[Player], None]], None]



def planks_request(rounds: int, *, session_id: str = "craft-1") -> dict[str, Any]:
    return {
        "sessionId": session_id,
        "recipeId": "planks",
        "multiplier": rounds,
        "ingredients": [{"itemId": "log", "quantity": rounds}],
    }


def owned(client: TestClient, headers: dict[str, str], item_id: str) -> int | None:
    response = client.get("/api/v1.1/inventory/survival", headers=headers)
    assert response.status_code == 200
    for item in response.json()["result"]["stackableItems"]:
        if item["id"] == item_id:
            return item["owned"]
    return None


def test_utility_blocks_list_every_slot(
    client: TestClient, auth_headers: dict[str, str]
) -> None:
    response = client.get("/api/v1.1/player/utilityBlocks", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["updates"] is None
    crafting = data["result"]["crafting"]
    smelting = data["result"]["smelting"]
    assert sorted(crafting) == ["1", "2", "3"]
    assert crafting["1"]["state"] == "Empty"
    assert crafting["1"]["streamVersion"] == 1
    assert crafting["2"]["state"] == "Locked"
    assert crafting["2"]["unlockPrice"] == {"cost": 5, "discount": 0}
    assert smelting["3"]["unlockPrice"] == {"cost": 10, "discount": 0}


def test_crafting_start_and_collect(
    client: TestClient,
    auth_headers: dict[str, str],
    seed: Seed,
    clock: ManualClock,
) -> None:
    seed(lambda player: player.inventory.add_items("log", 3))

    response = client.post(
        "/api/v1.1/crafting/1/start", json=planks_request(3), headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["result"] == {}
    assert response.json()["updates"] == {"inventory": 2, "crafting": 2}
    assert owned(client, auth_headers, "log") == 0

    clock.set(25_000)
    response = client.get("/api/v1.1/crafting/1", headers=auth_headers)
    assert response.status_code == 200
    slot = response.json()["result"]
    assert slot["state"] == "Active"
    assert slot["sessionId"] == "craft-1"
    assert slot["completed"] == 2
    assert slot["available"] == 2
    assert slot["total"] == 3
    assert slot["output"] == {"itemId": "planks", "quantity": 8}
    assert slot["escrow"] == [{"itemId": "log", "quantity": 3, "itemInstanceIds": None}]
    assert slot["nextCompletionUtc"].startswith("1970-01-01T00:00:30")
    assert slot["streamVersion"] == 2

    response = client.post("/api/v1.1/crafting/1/collectItems", headers=auth_headers)
    assert response.status_code == 200
    rewards = response.json()["result"]["rewards"]
    assert rewards["inventory"] == [{"id": "planks", "amount": 8}]
    assert owned(client, auth_headers, "planks") == 8


def test_crafting_start_without_ingredients_changes_nothing(
    client: TestClient, auth_headers: dict[str, str], seed: Seed
) -> None:
    seed(lambda player: player.inventory.add_items("log", 2))

    response = client.post(
        "/api/v1.1/crafting/1/start", json=planks_request(3), headers=auth_headers
    )
    assert response.status_code == 400
    assert owned(client, auth_headers, "log") == 2

    response = client.get("/api/v1.1/crafting/1", headers=auth_headers)
    assert response.json()["result"]["state"] == "Empty"


def test_crafting_rejects_locked_and_unknown_slots(
    client: TestClient, auth_headers: dict[str, str], seed: Seed
) -> None:
    seed(lambda player: player.inventory.add_items("log", 2))

    for number in (2, 4, 0):
        response = client.post(
            f"/api/v1.1/crafting/{number}/start",
            json=planks_request(1),
            headers=auth_headers,
        )
        assert response.status_code == 400
    assert client.get("/api/v1.1/crafting/9", headers=auth_headers).status_code == 400


def test_crafting_stop_returns_items(
    client: TestClient,
    auth_headers: dict[str, str],
    seed: Seed,
    clock: ManualClock,
) -> None:
    seed(lambda player: player.inventory.add_items("log", 2))
    client.post("/api/v1.1/crafting/1/start", json=planks_request(2), headers=auth_headers)

    clock.set(10_000)
    response = client.post("/api/v1.1/crafting/1/stop", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["result"]["state"] == "Empty"
    assert owned(client, auth_headers, "planks") == 4
    assert owned(client, auth_headers, "log") == 1


def test_finish_now_charges_current_price(
    client: TestClient,
    auth_headers: dict[str, str],
    seed: Seed,
    clock: ManualClock,
) -> None:
    def prepare(player: Player) -> None:
        player.inventory.add_items("log", 3)
        player.rubies.add_purchased(20)

    seed(prepare)
    client.post("/api/v1.1/crafting/1/start", json=planks_request(3), headers=auth_headers)

    clock.set(5_000)
    response = client.post(
        "/api/v1.1/crafting/1/finish",
        json={"expectedPurchasePrice": 10},
        headers=auth_headers,
    )
    assert response.status_code == 400

    response = client.post(
        "/api/v1.1/crafting/1/finish",
        json={"expectedPurchasePrice": 15},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["result"] == {"purchased": 5, "earned": 0}

    slot = client.get("/api/v1.1/crafting/1", headers=auth_headers).json()["result"]
    assert slot["state"] == "Completed"
    assert slot["available"] == 3


def test_unlock_requires_exact_price(
    client: TestClient, auth_headers: dict[str, str], seed: Seed
) -> None:
    seed(lambda player: player.rubies.add_earned(10))

    response = client.post(
        "/api/v1.1/crafting/2/unlock",
        json={"expectedPurchasePrice": 4},
        headers=auth_headers,
    )
    assert response.status_code == 400

    response = client.post(
        "/api/v1.1/crafting/2/unlock",
        json={"expectedPurchasePrice": 5},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["updates"] == {"crafting": 2}

    response = client.post(
        "/api/v1.1/crafting/2/unlock",
        json={"expectedPurchasePrice": 5},
        headers=auth_headers,
    )
    assert response.status_code == 400

    blocks = client.get("/api/v1.1/player/utilityBlocks", headers=auth_headers).json()
    assert blocks["result"]["crafting"]["2"]["state"] == "Empty"
    rubies = client.get("/api/v1.1/player/rubies", headers=auth_headers).json()
    assert rubies["result"] == 5
    split = client.get("/api/v1.1/player/splitRubies", headers=auth_headers).json()
    assert split["result"] == {"purchased": 0, "earned": 5}


def test_unlock_fails_without_rubies(
    client: TestClient, auth_headers: dict[str, str]
) -> None:
    response = client.post(
        "/api/v1.1/smelting/2/unlock",
        json={"expectedPurchasePrice": 5},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_finish_price_quote(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get(
        "/api/v1.1/crafting/finish/price",
        params={"remainingTime": "00:00:25"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["result"] == {"cost": 15, "discount": 0, "validTime": "00:00:5"}

    response = client.get(
        "/api/v1.1/smelting/finish/price",
        params={"remainingTime": "soon"},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_smelting_takes_only_required_fuel(
    client: TestClient,
    auth_headers: dict[str, str],
    seed: Seed,
    clock: ManualClock,
) -> None:
    def prepare(player: Player) -> None:
        player.inventory.add_items("iron_ore", 1)
        player.inventory.add_items("coal", 5)

    seed(prepare)
    response = client.post(
        "/api/v1.1/smelting/1/start",
        json={
            "sessionId": "smelt-1",
            "recipeId": "iron_ingot",
            "multiplier": 1,
            "input": {"itemId": "iron_ore", "quantity": 1},
            "fuel": {"itemId": "coal", "quantity": 5},
        },
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert owned(client, auth_headers, "coal") == 4

    clock.set(2_000)
    slot = client.get("/api/v1.1/smelting/1", headers=auth_headers).json()["result"]
    assert slot["state"] == "Active"
    assert slot["output"] == {"itemId": "iron_ingot", "quantity": 1}
    assert slot["fuel"] is None
    assert slot["burning"]["burnStartTime"].startswith("1970-01-01T00:00:00")
    assert slot["burning"]["burnsUntil"].startswith("1970-01-01T00:00:05")
    assert slot["burning"]["fuel"]["burnRate"] == {"burnTime": 10, "heatPerSecond": 2}

    clock.set(6_000)
    response = client.post("/api/v1.1/smelting/1/collectItems", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["result"]["rewards"]["inventory"] == [
        {"id": "iron_ingot", "amount": 1}
    ]
    assert owned(client, auth_headers, "iron_ingot") == 1

    slot = client.get("/api/v1.1/smelting/1", headers=auth_headers).json()["result"]
    assert slot["state"] == "Empty"
    assert slot["burning"]["remainingBurnTime"] == "00:00:5"
    assert slot["burning"]["heatDepleted"] == 10


def test_smelting_without_heat_is_rejected(
    client: TestClient, auth_headers: dict[str, str], seed: Seed
) -> None:
    seed(lambda player: player.inventory.add_items("iron_ore", 1))
    response = client.post(
        "/api/v1.1/smelting/1/start",
        json={
            "sessionId": "smelt-1",
            "recipeId": "iron_ingot",
            "multiplier": 1,
            "input": {"itemId": "iron_ore", "quantity": 1},
        },
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert owned(client, auth_headers, "iron_ore") == 1


def test_smelting_stop_refunds_input_and_fuel(
    client: TestClient,
    auth_headers: dict[str, str],
    seed: Seed,
    clock: ManualClock,
) -> None:
    def prepare(player: Player) -> None:
        player.inventory.add_items("iron_ore", 3)
        player.inventory.add_items("coal", 2)

    seed(prepare)
    client.post(
        "/api/v1.1/smelting/1/start",
        json={
            "sessionId": "smelt-1",
            "recipeId": "iron_ingot",
            "multiplier": 3,
            "input": {"itemId": "iron_ore", "quantity": 3},
            "fuel": {"itemId": "coal", "quantity": 2},
        },
        headers=auth_headers,
    )

    clock.set(3_000)
    response = client.post("/api/v1.1/smelting/1/stop", headers=auth_headers)
    assert response.status_code == 200
    slot = response.json()["result"]
    assert slot["state"] == "Empty"
    assert slot["burning"]["heatDepleted"] == 6
    assert owned(client, auth_headers, "iron_ore") == 3
    assert owned(client, auth_headers, "coal") == 1
