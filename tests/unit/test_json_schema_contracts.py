"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей
- Детекция нарушений типов
- Детекция нарушений constraints (minimum/minLength/const/additionalProperties)
- Интеграция с Pydantic моделями
"""

import json
from pathlib import Path

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    RETENTION_CONTRACTS,
    ContractValidator,
    SchemaLoader,
    get_validator,
    validate_retention_plan,
    validate_retention_policy,
    validate_retention_request,
)
from src.core.domain import RetentionItem, RetentionPlan


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_policy():
    """Валидная retention_policy для тестирования."""
    return {"base": 2, "retain": 10}


@pytest.fixture
def valid_request():
    """Валидный retention_request для тестирования."""
    return {
        "policy": {"base": 10, "retain": 3},
        "items": [
            {"identifier": "backup-0001.tar", "timestamp": 1700000000},
            {"identifier": "backup-0002.tar", "timestamp": 1700003600},
            {"identifier": "backup-0003.tar", "timestamp": 1700007200},
        ],
    }


@pytest.fixture
def valid_plan():
    """Валидный retention_plan для тестирования."""
    return {
        "schema_version": "1",
        "base": 2,
        "retain": 2,
        "kept": [
            {"identifier": "a", "timestamp": 1},
            {"identifier": "c", "timestamp": 3},
        ],
        "discarded": [{"identifier": "b", "timestamp": 2}],
    }


# =============================================================================
# TESTS - SCHEMA LOADING
# =============================================================================


def test_schema_loader_loads_all_schemas():
    """Проверка загрузки всех схем."""
    loader = SchemaLoader()

    policy_schema = loader.load_schema("retention_policy")
    request_schema = loader.load_schema("retention_request")
    plan_schema = loader.load_schema("retention_plan")

    assert policy_schema["title"] == "RetentionPolicy"
    assert request_schema["title"] == "RetentionRequest"
    assert plan_schema["properties"]["schema_version"]["const"] == "1"


def test_schema_loader_caches_schemas():
    """Проверка кэширования схем."""
    loader = SchemaLoader()

    schema1 = loader.load_schema("retention_plan")
    schema2 = loader.load_schema("retention_plan")

    # Должен вернуть тот же объект (кэш)
    assert schema1 is schema2


def test_schema_loader_raises_on_missing_schema():
    """Проверка ошибки при отсутствующей схеме."""
    loader = SchemaLoader()

    with pytest.raises(FileNotFoundError):
        loader.load_schema("non_existent_schema")


def test_all_contracts_have_schemas():
    """Каждый объявленный контракт загружается и кэшируется."""
    for contract in RETENTION_CONTRACTS:
        validator = get_validator(contract)
        assert validator.contract == contract
        assert get_validator(contract) is validator


def test_unknown_contract_rejected():
    """Неизвестное имя контракта — ошибка конфигурации."""
    with pytest.raises(ValueError, match="Unknown retention contract"):
        ContractValidator("market_state")


def test_validator_with_custom_loader(tmp_path: Path):
    """Валидатор может читать схемы из другого каталога."""
    (tmp_path / "retention_policy.json").write_text(
        json.dumps({"type": "object", "required": ["base"]}), encoding="utf-8"
    )
    validator = ContractValidator("retention_policy", loader=SchemaLoader(tmp_path))

    assert validator.is_valid({"base": 3})
    assert not validator.is_valid({})


def test_schema_loader_raises_on_missing_directory(tmp_path: Path):
    """Проверка ошибки при отсутствующем каталоге схем."""
    with pytest.raises(RuntimeError, match="Schema directory not found"):
        SchemaLoader(tmp_path / "missing")


def test_schema_loader_rejects_invalid_schema(tmp_path: Path):
    """Невалидная JSON Schema отклоняется при загрузке (meta-validation)."""
    (tmp_path / "broken.json").write_text(
        json.dumps({"type": "not-a-type"}), encoding="utf-8"
    )
    loader = SchemaLoader(tmp_path)

    with pytest.raises(ValueError, match="Invalid JSON Schema"):
        loader.load_schema("broken")


# =============================================================================
# TESTS - RETENTION POLICY VALIDATION
# =============================================================================


def test_policy_validator_accepts_valid_data(valid_policy):
    """Валидация правильной retention_policy."""
    validator = ContractValidator("retention_policy")
    validator.validate(valid_policy)  # Не должно выбросить исключение
    assert validator.is_valid(valid_policy)


def test_policy_fields_are_optional():
    """Пустая policy валидна: используются значения по умолчанию."""
    validate_retention_policy({})
    validate_retention_policy({"retain": 5})


def test_policy_rejects_base_one(valid_policy):
    """base должен быть >= 2."""
    data = valid_policy.copy()
    data["base"] = 1

    with pytest.raises(ValidationError):
        validate_retention_policy(data)


def test_policy_rejects_zero_retain(valid_policy):
    """retain должен быть >= 1."""
    data = valid_policy.copy()
    data["retain"] = 0

    with pytest.raises(ValidationError):
        validate_retention_policy(data)


def test_policy_rejects_wrong_type(valid_policy):
    """Валидация отклоняет неправильный тип данных."""
    data = valid_policy.copy()
    data["base"] = "two"

    with pytest.raises(ValidationError) as exc_info:
        validate_retention_policy(data)
    assert "is not of type 'integer'" in str(exc_info.value)


def test_policy_rejects_unknown_field(valid_policy):
    """Неизвестные поля запрещены (additionalProperties: false)."""
    data = valid_policy.copy()
    data["keep_forever"] = True

    assert not ContractValidator("retention_policy").is_valid(data)


# =============================================================================
# TESTS - RETENTION REQUEST VALIDATION
# =============================================================================


def test_request_validator_accepts_valid_data(valid_request):
    """Валидация правильного retention_request."""
    validator = ContractValidator("retention_request")
    validator.validate(valid_request)
    assert validator.is_valid(valid_request)


def test_request_accepts_empty_items(valid_request):
    """Пустой список items допустим."""
    data = valid_request.copy()
    data["items"] = []
    validate_retention_request(data)


def test_request_rejects_missing_policy(valid_request):
    """Валидация отклоняет данные без обязательных полей."""
    data = valid_request.copy()
    del data["policy"]

    with pytest.raises(ValidationError) as exc_info:
        validate_retention_request(data)
    assert "'policy' is a required property" in str(exc_info.value)


def test_request_policy_requires_both_fields(valid_request):
    """В запросе policy должна быть полной."""
    data = valid_request.copy()
    data["policy"] = {"base": 2}

    with pytest.raises(ValidationError):
        validate_retention_request(data)


def test_request_rejects_negative_timestamp(valid_request):
    """timestamp >= 0."""
    data = valid_request.copy()
    data["items"] = [{"identifier": "x", "timestamp": -1}]

    with pytest.raises(ValidationError):
        validate_retention_request(data)


def test_request_rejects_empty_identifier(valid_request):
    """identifier не может быть пустым."""
    data = valid_request.copy()
    data["items"] = [{"identifier": "", "timestamp": 1}]

    with pytest.raises(ValidationError):
        validate_retention_request(data)


def test_request_iter_errors_reports_all(valid_request):
    """iter_errors возвращает все нарушения, а не только первое."""
    data = valid_request.copy()
    data["items"] = [
        {"identifier": "", "timestamp": 1},
        {"identifier": "y", "timestamp": "soon"},
    ]

    errors = list(ContractValidator("retention_request").iter_errors(data))
    assert len(errors) == 2


# =============================================================================
# TESTS - RETENTION PLAN VALIDATION
# =============================================================================


def test_plan_validator_accepts_valid_data(valid_plan):
    """Валидация правильного retention_plan."""
    validator = ContractValidator("retention_plan")
    validator.validate(valid_plan)
    assert validator.is_valid(valid_plan)


def test_plan_rejects_wrong_schema_version(valid_plan):
    """schema_version фиксирована."""
    data = valid_plan.copy()
    data["schema_version"] = "2"

    with pytest.raises(ValidationError):
        validate_retention_plan(data)


def test_plan_rejects_missing_discarded(valid_plan):
    """discarded обязателен."""
    data = valid_plan.copy()
    del data["discarded"]

    with pytest.raises(ValidationError) as exc_info:
        validate_retention_plan(data)
    assert "'discarded' is a required property" in str(exc_info.value)


# =============================================================================
# TESTS - PYDANTIC INTEGRATION
# =============================================================================


def test_pydantic_plan_serializes_to_valid_contract():
    """RetentionPlan.to_contract() соответствует схеме retention_plan."""
    plan = RetentionPlan(
        base=2,
        retain=2,
        kept=(
            RetentionItem(identifier="a", timestamp=1),
            RetentionItem(identifier="c", timestamp=3),
        ),
        discarded=(RetentionItem(identifier="b", timestamp=2),),
    )

    contract = plan.to_contract()
    validate_retention_plan(contract)

    assert contract["schema_version"] == "1"
    assert contract["kept"] == [
        {"identifier": "a", "timestamp": 1},
        {"identifier": "c", "timestamp": 3},
    ]


def test_contract_round_trips_into_pydantic(valid_plan):
    """Валидный контракт загружается в RetentionPlan без потерь."""
    plan = RetentionPlan.model_validate(valid_plan)

    assert plan.kept_identifiers == ("a", "c")
    assert plan.discarded_identifiers == ("b",)
    assert plan.to_contract() == valid_plan
