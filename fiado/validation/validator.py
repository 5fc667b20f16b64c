"""
Input Validation

DESIGN DECISION: Every form submission is validated before any record
is constructed. A rejected submission never reaches the store, so no
partial record is ever persisted.

Checks:
- Required fields presence (customer name and phone, product name)
- Text fields fit the stored limits (name, phone, notes, description)
- Amount parsing (missing, not in a known notation, not positive,
  more than two decimal places)
- Payment method belongs to the configured set
- A debt cart is not empty

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the form can show them to the shop owner.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from fiado.config import DEFAULT_PAYMENT_METHODS
from fiado.models.ledger import (
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    ValidationIssue,
    ValidationResult,
)


# Plain notation: 25, 25.00, -5
_PLAIN_AMOUNT = re.compile(r"-?\d+(\.\d+)?")
# Comma notation: 25,00 or 1.234,50 with dots grouping thousands
_COMMA_AMOUNT = re.compile(r"-?(\d+|\d{1,3}(\.\d{3})+),\d+")


def parse_amount(text: Optional[str]) -> Optional[Decimal]:
    """
    Parse a money amount typed by the user.

    Accepts "25.00", "25,00" and "1.234,50". Returns None when the text
    is empty or does not match one of those notations, so "1,5.3" or
    "1.2.3,4" are rejected instead of being reinterpreted.
    """
    if text is None:
        return None
    text = str(text).strip()
    if not text:
        return None
    if _COMMA_AMOUNT.fullmatch(text):
        text = text.replace(".", "").replace(",", ".")
    elif not _PLAIN_AMOUNT.fullmatch(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def _result(issues: list[ValidationIssue]) -> ValidationResult:
    return ValidationResult(
        is_valid=not any(issue.severity == "error" for issue in issues),
        issues=issues,
    )


class RecordValidationError(ValueError):
    """A form submission was rejected before any record was created."""

    def __init__(self, entity_type: str, result: ValidationResult):
        self.entity_type = entity_type
        self.result = result
        super().__init__(get_user_friendly_summary(result))


class RecordValidator:
    """
    Validates form input for debtors, products, payments and carts.

    Each method returns a ValidationResult; callers decide whether to
    raise RecordValidationError.
    """

    def __init__(self, payment_methods: Optional[Sequence[str]] = None):
        """
        Initialize validator.

        Args:
            payment_methods: Accepted payment method labels.
                             Defaults to the standard set.
        """
        if payment_methods is None:
            payment_methods = [
                m.strip() for m in DEFAULT_PAYMENT_METHODS.split(",")
            ]
        self._payment_methods = list(payment_methods)

    @property
    def payment_methods(self) -> list[str]:
        return list(self._payment_methods)

    def _check_amount(
        self,
        field: str,
        text: Optional[str],
        label: str,
    ) -> list[ValidationIssue]:
        if text is None or not str(text).strip():
            return [ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"Informe {label}",
            )]

        value = parse_amount(text)
        if value is None:
            return [ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=f"{label.capitalize()} não é um número válido: {text}",
            )]
        if value <= 0:
            return [ValidationIssue(
                field=field,
                issue_type="not_positive",
                message=f"{label.capitalize()} deve ser maior que zero",
            )]
        if value.as_tuple().exponent < -2:
            return [ValidationIssue(
                field=field,
                issue_type="too_many_decimals",
                message=f"{label.capitalize()} aceita no máximo duas casas decimais",
            )]
        return []

    def _check_length(
        self,
        field: str,
        text: Optional[str],
        limit: int,
        label: str,
    ) -> list[ValidationIssue]:
        # Measured after stripping, as the models store it
        if text is not None and len(text.strip()) > limit:
            return [ValidationIssue(
                field=field,
                issue_type="too_long",
                message=f"{label.capitalize()} pode ter no máximo {limit} caracteres",
            )]
        return []

    def validate_debtor(
        self,
        name: Optional[str],
        phone: Optional[str],
        notes: Optional[str] = None,
    ) -> ValidationResult:
        """Validate the customer form."""
        issues = []

        if not name or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="O nome do cliente é obrigatório",
            ))
        else:
            issues.extend(self._check_length("name", name, NAME_MAX_LENGTH, "o nome"))

        if not phone or not phone.strip():
            issues.append(ValidationIssue(
                field="phone",
                issue_type="missing",
                message="O telefone do cliente é obrigatório",
            ))
        else:
            issues.extend(self._check_length("phone", phone, PHONE_MAX_LENGTH, "o telefone"))

        issues.extend(self._check_length("notes", notes, NOTES_MAX_LENGTH, "as observações"))
        return _result(issues)

    def validate_product(
        self,
        name: Optional[str],
        price_text: Optional[str],
    ) -> ValidationResult:
        """Validate the product form."""
        issues = []

        if not name or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="O nome do produto é obrigatório",
            ))
        else:
            issues.extend(self._check_length("name", name, NAME_MAX_LENGTH, "o nome"))

        issues.extend(self._check_amount("default_price", price_text, "o preço"))
        return _result(issues)

    def validate_payment(
        self,
        amount_text: Optional[str],
        method: Optional[str],
        description: Optional[str] = None,
    ) -> ValidationResult:
        """Validate the payment form."""
        issues = self._check_amount("total_amount", amount_text, "o valor")

        if not method or method not in self._payment_methods:
            issues.append(ValidationIssue(
                field="payment_method",
                issue_type="invalid_choice",
                message=(
                    f"Forma de pagamento inválida: {method or '(vazia)'}. "
                    f"Opções: {', '.join(self._payment_methods)}"
                ),
            ))

        issues.extend(self._check_length(
            "description", description, DESCRIPTION_MAX_LENGTH, "a descrição"
        ))
        return _result(issues)

    def validate_cart(self, cart, description: Optional[str] = None) -> ValidationResult:
        """A debt can only be recorded from a non-empty cart."""
        issues = []
        if cart.is_empty:
            issues.append(ValidationIssue(
                field="items",
                issue_type="empty_cart",
                message="Adicione pelo menos um produto ao carrinho",
            ))
        issues.extend(self._check_length(
            "description", description, DESCRIPTION_MAX_LENGTH, "a descrição"
        ))
        return _result(issues)

    def validate_quantity(self, quantity) -> ValidationResult:
        """Quantities are whole units, at least one."""
        issues = []
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            issues.append(ValidationIssue(
                field="quantity",
                issue_type="not_positive",
                message=f"Quantidade inválida: {quantity}. Use um número inteiro a partir de 1",
            ))
        return _result(issues)


def get_user_friendly_summary(result: ValidationResult) -> str:
    """
    Generate a user-friendly summary of validation results.

    This is what the forms show to the shop owner.
    """
    if result.is_valid and not result.issues:
        return "✅ Tudo certo!"

    lines = []

    errors = [i for i in result.issues if i.severity == "error"]
    warnings = [i for i in result.issues if i.severity == "warning"]

    if errors:
        lines.append("❌ Corrija os itens abaixo:")
        for issue in errors:
            lines.append(f"   • {issue.message}")

    if warnings:
        lines.append("⚠️ Atenção:")
        for issue in warnings:
            lines.append(f"   • {issue.message}")

    return "\n".join(lines)
