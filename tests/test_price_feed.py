from fastapi.testclient import TestClient


def test_websocket_sends_initial_prices(app):
    with TestClient(app) as c:
        with c.websocket_connect("/") as ws:
            message = ws.receive_json()
    assert message["type"] == "initial-prices"
    assert [s["id"] for s in message["data"]] == [1, 2, 3, 4, 5]
    assert message["data"][4] == {"id": 5, "symbol": "ADA", "name": "Cardano", "price": 0.5}
