import pytest

from core.domain.operations import (
    CATALOG,
    AddPrefixSuffixSettings,
    CaseType,
    ChangeCaseSettings,
    CounterIdGenerator,
    DeduplicateSettings,
    Operation,
    OperationChain,
    OperationKind,
    RandomIdGenerator,
    RegexReplaceSettings,
    RemoveCharactersSettings,
    UnknownOperationKindError,
    create_operation,
    default_settings,
    label,
)


@pytest.fixture
def ids() -> CounterIdGenerator:
    return CounterIdGenerator()


class TestCatalog:
    def test_every_kind_is_registered(self) -> None:
        assert set(CATALOG) == set(OperationKind)

    @pytest.mark.parametrize("kind", list(OperationKind))
    def test_defaults_and_labels_are_total(self, kind: OperationKind) -> None:
        assert isinstance(default_settings(kind), CATALOG[kind].settings_type)
        assert label(kind)

    def test_default_values(self) -> None:
        assert default_settings(OperationKind.REGEX_REPLACE) == RegexReplaceSettings("", "", "g")
        assert default_settings(OperationKind.CHANGE_CASE).case_type is CaseType.LOWERCASE
        assert default_settings(OperationKind.DEDUPLICATE).preserve_order is True

    def test_catalog_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            CATALOG[OperationKind.DEDUPLICATE] = None  # type: ignore[index]

    def test_parse_unknown_kind(self) -> None:
        with pytest.raises(UnknownOperationKindError):
            OperationKind.parse("shuffleLines")


class TestIdGenerators:
    def test_counter_is_monotonic(self, ids: CounterIdGenerator) -> None:
        assert [ids(), ids(), ids()] == ["op-1", "op-2", "op-3"]

    def test_random_ids_are_unique(self) -> None:
        generate = RandomIdGenerator()
        assert len({generate() for _ in range(500)}) == 500

    def test_random_length_bounds(self) -> None:
        with pytest.raises(ValueError):
            RandomIdGenerator(length=4)


class TestOperation:
    def test_create_operation(self, ids: CounterIdGenerator) -> None:
        op = create_operation("changeCase", ids)
        assert op.id == "op-1"
        assert op.kind is OperationKind.CHANGE_CASE
        assert op.enabled is True
        assert op.settings == ChangeCaseSettings()

    def test_missing_settings_fall_back_to_defaults(self) -> None:
        op = Operation(id="x", kind=OperationKind.ADD_PREFIX_SUFFIX)
        assert op.settings == AddPrefixSuffixSettings()

    def test_settings_must_match_kind(self) -> None:
        with pytest.raises(ValueError):
            Operation(
                id="x",
                kind=OperationKind.CHANGE_CASE,
                settings=RemoveCharactersSettings(","),
            )

    def test_preserve_order_is_strict_boolean(self) -> None:
        with pytest.raises(ValueError):
            DeduplicateSettings(preserve_order=0)  # type: ignore[arg-type]

    def test_with_settings_and_toggle_return_copies(self, ids: CounterIdGenerator) -> None:
        op = create_operation(OperationKind.REMOVE_CHARACTERS, ids)
        edited = op.with_settings(characters=",!")
        assert edited.settings.characters == ",!"
        assert op.settings.characters == ""
        assert op.toggled().enabled is False
        assert op.enabled is True

    def test_dict_contract(self) -> None:
        op = Operation(
            id="a1",
            kind=OperationKind.CHANGE_CASE,
            enabled=False,
            settings=ChangeCaseSettings(CaseType.SENTENCE),
        )
        payload = op.to_dict()
        assert payload == {
            "id": "a1",
            "type": "changeCase",
            "enabled": False,
            "settings": {"caseType": "sentence"},
        }
        assert Operation.from_dict(payload) == op

    def test_from_dict_fills_missing_settings(self) -> None:
        op = Operation.from_dict({"id": "r", "type": "regexReplace", "settings": {"pattern": "a"}})
        assert op.settings == RegexReplaceSettings(pattern="a", replacement="", flags="g")

    def test_from_dict_keeps_explicit_false(self) -> None:
        op = Operation.from_dict(
            {"id": "d", "type": "deduplicate", "settings": {"preserveOrder": False}}
        )
        assert op.settings.preserve_order is False

    def test_from_dict_unknown_kind(self) -> None:
        with pytest.raises(UnknownOperationKindError):
            Operation.from_dict({"id": "z", "type": "reverse"})

    @pytest.mark.parametrize(
        "kind,settings",
        [
            ("regexReplace", {"pattern": None}),
            ("regexReplace", {"flags": 1}),
            ("removeCharacters", {"characters": 5}),
            ("addPrefixSuffix", {"prefix": None}),
            ("changeCase", {"caseType": "title"}),
            ("deduplicate", {"preserveOrder": "yes"}),
        ],
    )
    def test_from_dict_rejects_mistyped_settings(self, kind: str, settings: dict) -> None:
        with pytest.raises(ValueError):
            Operation.from_dict({"id": "x", "type": kind, "settings": settings})

    def test_from_dict_rejects_non_string_id(self) -> None:
        with pytest.raises(ValueError):
            Operation.from_dict({"id": 3, "type": "trimWhitespace"})

    @pytest.mark.parametrize(
        "factory",
        [
            lambda: RemoveCharactersSettings(characters=None),
            lambda: RegexReplaceSettings(replacement=1),
            lambda: AddPrefixSuffixSettings(suffix=b"!"),
        ],
    )
    def test_settings_require_strings(self, factory) -> None:
        with pytest.raises(ValueError):
            factory()


class TestOperationChain:
    def _chain(self, ids: CounterIdGenerator) -> OperationChain:
        return OperationChain(
            tuple(
                create_operation(kind, ids)
                for kind in ("trimWhitespace", "deduplicate", "trimWhitespace")
            )
        )

    def test_same_kind_allowed_twice(self, ids: CounterIdGenerator) -> None:
        chain = self._chain(ids)
        assert len(chain) == 3
        assert chain.ids == ("op-1", "op-2", "op-3")

    def test_duplicate_ids_rejected(self) -> None:
        op = Operation(id="same", kind=OperationKind.TRIM_WHITESPACE)
        with pytest.raises(ValueError):
            OperationChain((op, op))

    def test_truncated(self, ids: CounterIdGenerator) -> None:
        chain = self._chain(ids)
        assert chain.truncated("op-2").ids == ("op-1", "op-2")
        assert chain.truncated("missing") == chain
        assert chain.truncated(None) == chain

    def test_replace_remove_swap(self, ids: CounterIdGenerator) -> None:
        chain = self._chain(ids)
        toggled = chain.replace(chain[1].toggled())
        assert toggled[1].enabled is False
        assert chain[1].enabled is True
        assert chain.remove("op-1").ids == ("op-2", "op-3")
        assert chain.swap(0, 1).ids == ("op-2", "op-1", "op-3")

    def test_enabled_steps(self, ids: CounterIdGenerator) -> None:
        chain = self._chain(ids)
        chain = chain.replace(chain[0].toggled())
        assert [op.id for op in chain.enabled_steps()] == ["op-2", "op-3"]

    def test_list_contract(self, ids: CounterIdGenerator) -> None:
        chain = self._chain(ids)
        assert OperationChain.from_list(chain.to_list()) == chain
