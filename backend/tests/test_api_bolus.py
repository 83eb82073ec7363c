import pytest


URL = "/api/bolus/suggest"


def test_suggest_success(client):
    resp = client.post(
        URL,
        json={"carbs": 60, "current_glucose": 180, "carb_ratio": 10, "sensitivity_factor": 50, "target_glucose": 100},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["suggested_bolus"] == 7.6
    assert body["details"]["carb_units"] == 6.0
    assert body["details"]["correction_units"] == 1.6
    assert body["details"]["parameters"] == {"carb_ratio": 10, "sensitivity_factor": 50, "target_glucose": 100}
    assert resp.headers["access-control-allow-origin"] == "*"


def test_suggest_uses_defaults(client):
    resp = client.post(URL, json={"carbs": 20, "current_glucose": 150})
    assert resp.status_code == 200
    body = resp.json()
    assert body["suggested_bolus"] == 3.0
    assert body["details"]["parameters"]["target_glucose"] == 100


@pytest.mark.parametrize(
    "payload,message",
    [
        ({"carbs": 0, "current_glucose": 120}, "Los carbohidratos deben ser un número positivo."),
        ({"current_glucose": 120}, "Los carbohidratos deben ser un número positivo."),
        ({"carbs": 50, "current_glucose": -5}, "La glucosa actual debe ser un número positivo."),
        ({"carbs": 50, "current_glucose": "120"}, "La glucosa actual debe ser un número positivo."),
        ({"carbs": 50, "current_glucose": 120, "carb_ratio": None}, "El ratio de carbohidratos debe ser un número positivo."),
        ({"carbs": 50, "current_glucose": 120, "sensitivity_factor": True}, "El factor de sensibilidad debe ser un número positivo."),
        ({"carbs": 50, "current_glucose": 120, "target_glucose": 0}, "La glucosa objetivo debe ser un número positivo."),
    ],
)
def test_suggest_validation_errors(client, payload, message):
    resp = client.post(URL, json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": message}


def test_suggest_reports_first_failure_only(client):
    resp = client.post(URL, json={"carbs": -1, "current_glucose": -1})
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Los carbohidratos")


def test_suggest_rejects_non_finite(client):
    resp = client.post(
        URL,
        content='{"carbs": NaN, "current_glucose": 120}',
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert "carbohidratos" in resp.json()["error"]


@pytest.mark.parametrize("raw", ["not json", "[1, 2]", "42"])
def test_suggest_rejects_bad_body(client, raw):
    resp = client.post(URL, content=raw, headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "El cuerpo de la solicitud debe ser un objeto JSON."}


def test_suggest_preflight(client):
    resp = client.options(URL)
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert "Authorization" in resp.headers["access-control-allow-headers"]


@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "TRACE", "PROPFIND"])
def test_suggest_wrong_method(client, method):
    resp = client.request(method, URL)
    assert resp.status_code == 405
    assert resp.json() == {"error": "Método no permitido. Use POST."}
    assert resp.headers["allow"] == "POST, OPTIONS"


def test_suggest_internal_error(client, mocker):
    mocker.patch(
        "glucosmart.api.bolus.calculate",
        side_effect=ZeroDivisionError("boom"),
    )
    resp = client.post(URL, json={"carbs": 60, "current_glucose": 180})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Error interno del servidor."}


def test_suggest_head_not_allowed(client):
    resp = client.head(URL)
    assert resp.status_code == 405
    assert resp.headers["allow"] == "POST, OPTIONS"


def test_browser_preflight_advertises_post_only(client):
    resp = client.options(
        URL,
        headers={
            "Origin": "https://app.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert "Content-Type" in resp.headers["access-control-allow-headers"]


def test_suggest_echoes_parameters_as_sent(client):
    resp = client.post(URL, json={"carbs": 45, "current_glucose": 100, "carb_ratio": 15, "sensitivity_factor": 40.5})
    assert resp.status_code == 200
    parameters = resp.json()["details"]["parameters"]
    assert parameters == {"carb_ratio": 15, "sensitivity_factor": 40.5, "target_glucose": 100}
    assert '"carb_ratio":15,' in resp.text


@pytest.mark.parametrize(
    "payload,message",
    [
        ({"carbs": 1e308, "current_glucose": 120}, "Los carbohidratos deben ser un número positivo."),
        ({"carbs": 10**400, "current_glucose": 120}, "Los carbohidratos deben ser un número positivo."),
        (
            {"carbs": 10, "current_glucose": 1e308, "sensitivity_factor": 1e-10},
            "La glucosa actual debe ser un número positivo.",
        ),
    ],
)
def test_suggest_overflow_is_a_client_error(client, payload, message):
    resp = client.post(URL, json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": message}
