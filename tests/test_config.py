"""Tests for config loading."""

from status_formatter import Account, AccountDirectory, Status, create_formatter, load_config, load_from_yaml


def test_load_config_defaults():
    cfg = load_config({})
    assert cfg["local_domain"] == "localhost"
    assert cfg["scheme"] == "https"
    assert cfg["visible_url_length"] == 30
    assert cfg["link_rel"] == "nofollow noopener"
    assert cfg["link_target"] == "_blank"
    assert cfg["allowed_tags"] is None
    assert cfg["allowed_attributes"] is None


def test_load_config_nested():
    cfg = load_config({
        "status_formatter": {
            "local_domain": "social.example",
            "visible_url_length": "12",
            "links": {"rel": "nofollow"},
            "sanitizer": {"tags": ["p", "a"], "attributes": {"a": ["href"]}},
        },
    })
    assert cfg["local_domain"] == "social.example"
    assert cfg["visible_url_length"] == 12
    assert cfg["link_rel"] == "nofollow"
    assert cfg["link_target"] == "_blank"
    assert cfg["allowed_tags"] == {"p", "a"}
    assert cfg["allowed_attributes"] == {"a": {"href"}}


def test_load_from_yaml(tmp_path):
    path = tmp_path / "formatter.yaml"
    path.write_text(
        "status_formatter:\n"
        "  local_domain: social.example\n"
        "  scheme: http\n"
        "  links:\n"
        "    target: _self\n"
    )
    cfg = load_from_yaml(path)
    assert cfg["local_domain"] == "social.example"
    assert cfg["scheme"] == "http"
    assert cfg["link_target"] == "_self"


def test_create_formatter():
    alice = Account("alice")
    formatter = create_formatter(
        {"local_domain": "social.example", "links": {"target": "_self"}},
        resolver=AccountDirectory([alice]),
    )
    html = formatter.format(Status("@alice https://x.com", account=alice))
    assert 'href="https://social.example/@alice"' in html
    assert 'target="_self"' in html


def test_create_formatter_accepts_normalized_config():
    formatter = create_formatter(load_config({"scheme": "http", "local_domain": "a.example"}))
    assert formatter.config.base_url == "http://a.example"


def test_create_formatter_sanitizer_allowlist():
    formatter = create_formatter({"sanitizer": {"tags": ["p", "b"], "attributes": {}}})
    status = Status("<p><b>bold</b> <i>it</i></p>", account=Account("bob", "example.com"), local=False)
    assert formatter.format(status) == "<p><b>bold</b> it</p>"
