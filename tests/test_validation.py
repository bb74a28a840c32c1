from delve.validation import validate, validate_intent


def test_validate_requires_object():
    ok, err = validate(["nope"], {})
    assert not ok and err["code"] == "type"


def test_validate_missing_and_type_errors():
    schema = {"name": ("str", True, {"max_len": 5}), "count": ("int", False)}
    assert validate({}, schema) == (False, {"field": "name", "error": "missing required field", "code": "required"})
    ok, err = validate({"name": "abc", "count": "3"}, schema)
    assert not ok and err["field"] == "count"
    ok, data = validate({"name": "  abc"}, schema)
    assert ok and data == {"name": "abc"}
    ok, err = validate({"name": "toolong"}, schema)
    assert err["code"] == "max_len"


def test_bool_is_not_an_int():
    ok, err = validate_intent({"kind": "move", "dx": True, "dy": 0})
    assert not ok and err["code"] == "type"


def test_move_must_be_cardinal_unit_step():
    assert validate_intent({"kind": "move", "dx": 0, "dy": -1}) == (True, {"kind": "move", "dx": 0, "dy": -1})
    ok, err = validate_intent({"kind": "move", "dx": -1, "dy": 1})
    assert not ok and err["code"] == "step"


def test_slot_bounds():
    assert validate_intent({"kind": "use", "slot": 25})[0]
    ok, err = validate_intent({"kind": "drop", "slot": 26})
    assert not ok and err["code"] == "max"
    ok, err = validate_intent({"kind": "drop", "slot": -1})
    assert not ok and err["code"] == "min"


def test_unknown_kind_rejected():
    ok, err = validate_intent({"kind": "fly"})
    assert not ok and err == {"field": "kind", "error": "unsupported value", "code": "choices"}


def test_extra_fields_dropped():
    ok, data = validate_intent({"kind": "quit", "junk": 1})
    assert ok and data == {"kind": "quit"}
