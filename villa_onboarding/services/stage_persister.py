"""Applies validated stage data to the villa record.

Scalar stages are additive: a field absent from the payload is left alone and
only an explicit ``None`` clears a column. Collection stages replace by natural
key when the collection is present: incoming entities update their stored
counterpart (or are created), and stored entities that were not seen are
deactivated or removed.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from villa_onboarding.contracts.aliases import canonicalize_entity
from villa_onboarding.contracts.fields import is_blank
from villa_onboarding.contracts.stages import COLLECTION_KEYS
from villa_onboarding.contracts.validation import (
    ValidatedStage,
    entity_defaults,
    validate_entity,
)
from villa_onboarding.core.exceptions import NotFoundError, ValidationError
from villa_onboarding.database.models import Villa
from villa_onboarding.repositories.progress_repository import OnboardingProgressRepository
from villa_onboarding.repositories.villa_repository import (
    COLLECTION_MODELS,
    SCALAR_STAGE_MODELS,
    VillaChildRepository,
)
from villa_onboarding.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Collections whose unseen rows are deactivated; the rest are deleted
DEACTIVATED_COLLECTIONS = frozenset({"platforms", "documents", "staff"})

NaturalKey = Tuple[Any, ...]


@dataclass
class BatchResult:
    """Summary of one persister write."""

    created: int = 0
    updated: int = 0
    deactivated: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PreparedStage:
    """A validated stage with its collection entities validated one by one."""

    validated: ValidatedStage
    collection: Optional[str] = None
    entities: List[Dict[str, Any]] = field(default_factory=list)
    failed_keys: List[NaturalKey] = field(default_factory=list)
    failed: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def step(self) -> int:
        return self.validated.step

    @property
    def replaces_collection(self) -> bool:
        return self.collection is not None and not self.validated.skipped


def _text(value: Any) -> Optional[str]:
    if is_blank(value) or not isinstance(value, (str, int, float)):
        return None
    return str(value).strip()


def natural_key(collection: str, values: Mapping) -> Optional[NaturalKey]:
    """Natural key of an entity from its snake_case values.

    Args:
        collection: Collection key
        values: Entity values (validated, stored, or best-effort raw)

    Returns:
        Hashable key, or None when the entity carries no key
    """
    if collection == "platforms":
        platform = _text(values.get("platform"))
        return ("platform", platform.upper()) if platform else None

    if collection == "documents":
        document_type = _text(values.get("document_type"))
        filename = _text(values.get("filename"))
        if document_type is None and filename is None:
            return None
        return ("document", document_type, filename)

    if collection == "staff":
        email = _text(values.get("email"))
        if email:
            return ("email", email.lower())
        return staff_name_key(values)

    if collection == "facilities":
        category = _text(values.get("category"))
        item_name = _text(values.get("item_name"))
        if category is None or item_name is None:
            return None
        return ("facility", category, item_name)

    if collection == "photos":
        filename = _text(values.get("filename"))
        if filename:
            return ("filename", filename)
        url = _text(values.get("url"))
        return ("url", url) if url else None

    return None


def staff_name_key(values: Mapping) -> Optional[NaturalKey]:
    first_name = _text(values.get("first_name"))
    last_name = _text(values.get("last_name"))
    if first_name is None or last_name is None:
        return None
    return ("name", first_name.lower(), last_name.lower())


# camelCase key fields read from an entity that failed validation
_RAW_KEY_FIELDS = {
    "platform": "platform",
    "type": "document_type",
    "filename": "filename",
    "email": "email",
    "firstName": "first_name",
    "lastName": "last_name",
    "category": "category",
    "itemName": "item_name",
    "url": "url",
}


def raw_natural_key(collection: str, data: Any) -> Optional[NaturalKey]:
    """Best-effort natural key of an entity that failed validation."""
    if not isinstance(data, Mapping):
        return None
    canonical = canonicalize_entity(collection, data)
    values = {
        snake: canonical.get(camel)
        for camel, snake in _RAW_KEY_FIELDS.items()
        if camel in canonical
    }
    return natural_key(collection, values)


def assign_columns(row, values: Mapping, user_id: Optional[str] = None) -> int:
    """Copy values onto mapped columns of a row.

    Keys without a column are ignored; ``None`` for a NOT NULL column is
    skipped rather than written.

    Returns:
        Number of columns assigned
    """
    columns = row.__table__.c
    assigned = 0
    for key, value in values.items():
        column = columns.get(key)
        if column is None or column.primary_key:
            LOGGER.debug(f"No column {key} on {row.__tablename__}")
            continue
        if value is None and not column.nullable:
            LOGGER.warning(
                f"Ignoring clear of required column {row.__tablename__}.{key}",
                extra={"table": row.__tablename__, "column": key},
            )
            continue
        setattr(row, key, value)
        assigned += 1
    if user_id is not None and "updated_by" in columns:
        row.updated_by = user_id
    return assigned


def apply_defaults(row, defaults: Mapping) -> None:
    """Fill defaults into columns that are still null."""
    for key, value in defaults.items():
        if key in row.__table__.c and getattr(row, key, None) is None:
            setattr(row, key, value)


class StagePersister:
    """Writes one stage submission into the villa record.

    ``prepare`` does all validation up front; ``apply`` only writes and runs
    inside the caller's transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.progress_repository = OnboardingProgressRepository(session)

    def prepare(self, validated: ValidatedStage) -> PreparedStage:
        """Validate every entity of a collection stage independently.

        A bad entity is reported and skipped; its natural key, when one can be
        derived, is kept so the stored counterpart is not deactivated.
        """
        collection = COLLECTION_KEYS.get(validated.step)
        if collection is None or collection not in validated.values:
            return PreparedStage(validated=validated)

        raw_entities = validated.values.get(collection)
        if raw_entities is None:
            return PreparedStage(validated=validated)

        prepared = PreparedStage(validated=validated, collection=collection)
        for index, raw in enumerate(raw_entities):
            try:
                prepared.entities.append(
                    validate_entity(collection, raw, prefix=f"{collection}[{index}].")
                )
            except ValidationError as e:
                prepared.failed += 1
                prepared.errors.extend(e.messages or [e.args[0]])
                key = raw_natural_key(collection, raw)
                if key is not None:
                    prepared.failed_keys.append(key)

        if prepared.errors:
            LOGGER.warning(
                f"{prepared.failed} of {len(raw_entities)} "
                f"{collection} entries failed validation",
                extra={"step": validated.step, "errors": prepared.errors},
            )
        return prepared

    async def apply(
        self,
        villa: Villa,
        prepared: PreparedStage,
        user_id: Optional[str] = None,
    ) -> BatchResult:
        """Write a prepared stage.

        Args:
            villa: The villa being onboarded
            prepared: Output of ``prepare``
            user_id: Acting user for audit columns

        Returns:
            BatchResult: Counts of created, updated and deactivated rows
        """
        result = BatchResult(failed=prepared.failed, errors=list(prepared.errors))

        if prepared.validated.skipped:
            return result

        step = prepared.step
        if step == 1:
            self._apply_scalar(villa, prepared.validated, user_id, result)
        elif step in SCALAR_STAGE_MODELS:
            await self._apply_child_scalar(villa, prepared.validated, user_id, result)
        elif step == 10:
            await self._apply_review(villa, prepared.validated, user_id, result)
        elif prepared.replaces_collection:
            await self._replace_collection(villa, prepared, user_id, result)

        await self.session.flush()
        return result

    def _apply_scalar(self, row, validated: ValidatedStage, user_id, result: BatchResult) -> None:
        if assign_columns(row, validated.values, user_id):
            result.updated += 1
        apply_defaults(row, validated.defaults)

    async def _apply_child_scalar(self, villa: Villa, validated: ValidatedStage, user_id, result) -> None:
        repository = VillaChildRepository(self.session, SCALAR_STAGE_MODELS[validated.step])
        row = await repository.get_by_villa_id(villa.id)
        if row is None:
            row = repository.model(villa_id=villa.id, created_by=user_id)
            assign_columns(row, validated.values, user_id)
            apply_defaults(row, validated.defaults)
            self.session.add(row)
            result.created += 1
            return
        self._apply_scalar(row, validated, user_id, result)

    async def _apply_review(self, villa: Villa, validated: ValidatedStage, user_id, result) -> None:
        row = await self.progress_repository.get_by_villa_id(villa.id)
        if row is None:
            raise NotFoundError(f"Onboarding progress not found for villa {villa.id}")
        self._apply_scalar(row, validated, user_id, result)

    async def _replace_collection(
        self,
        villa: Villa,
        prepared: PreparedStage,
        user_id: Optional[str],
        result: BatchResult,
    ) -> None:
        collection = prepared.collection
        repository = VillaChildRepository(self.session, COLLECTION_MODELS[collection])
        existing = await repository.list_by_villa_id(villa.id)

        index: Dict[NaturalKey, Any] = {}
        for row in existing:
            self._index_row(collection, row, index)

        seen = set()
        for values in prepared.entities:
            row = self._match(collection, values, index)
            if row is not None:
                assign_columns(row, values, user_id)
                if "is_active" in row.__table__.c and "is_active" not in values:
                    row.is_active = True
                if row not in seen:
                    result.updated += 1
            else:
                row = repository.model(villa_id=villa.id, created_by=user_id)
                assign_columns(row, values, user_id)
                apply_defaults(row, entity_defaults(collection, values))
                self.session.add(row)
                self._index_row(collection, row, index)
                result.created += 1
            seen.add(row)

        for key in prepared.failed_keys:
            row = index.get(key)
            if row is not None:
                seen.add(row)

        for row in existing:
            if row in seen:
                continue
            if collection in DEACTIVATED_COLLECTIONS:
                if row.is_active:
                    row.is_active = False
                    if user_id is not None:
                        row.updated_by = user_id
                    result.deactivated += 1
            else:
                await self.session.delete(row)
                result.deactivated += 1

    @staticmethod
    def _index_row(collection: str, row, index: Dict[NaturalKey, Any]) -> None:
        values = {column: getattr(row, column, None) for column in row.__table__.c.keys()}
        key = natural_key(collection, values)
        if key is not None:
            index.setdefault(key, row)
        if collection == "staff":
            name_key = staff_name_key(values)
            if name_key is not None:
                index.setdefault(name_key, row)

    @staticmethod
    def _match(collection: str, values: Mapping, index: Dict[NaturalKey, Any]):
        key = natural_key(collection, values)
        row = index.get(key) if key is not None else None
        if row is None and collection == "staff" and key and key[0] == "email":
            # An incoming email may complete a row stored without one
            candidate = index.get(staff_name_key(values))
            if candidate is not None and candidate.email is None:
                row = candidate
        return row
