from src.timeport_forms.timeport_forms.main import create_app


def test_create_app_registers_form_routes(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("AUTO_INIT_DB", "0")
    monkeypatch.setenv("AUTO_SEED_DB", "0")

    app = create_app()
    client = app.test_client()

    assert app.config["TESTING"] is True
    assert client.get("/health").get_json() == {"status": "ok"}
    assert client.get("/api/forms").status_code == 401
    endpoints = {rule.endpoint for rule in app.url_map.iter_rules()}
    assert {"list_forms", "create_form", "save_form_fields", "apply_builder_operation", "evaluate_form"} <= endpoints
