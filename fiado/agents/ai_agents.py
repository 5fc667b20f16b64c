"""
AI Agents for Fiado Digital

DESIGN DECISION: The text-generation service is a thin collaborator.
It receives structured ledger data and returns text. It never touches
the book, never decides anything about balances, and never raises past
its boundary.

CRITICAL BOUNDARIES:

1. COLLECTION AGENT:
   - CAN: Draft a WhatsApp reminder for a debtor, in a chosen tone
   - CAN: Summarize a debtor's recent purchases and payments
   - CANNOT: Change or persist any record
   - MUST: Return a readable fallback text when the service fails

Single-shot request/response: no streaming, no retries. Timeouts are
whatever the underlying client provides.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Sequence

import google.generativeai as genai
import structlog

from fiado.config import get_settings
from fiado.models.ledger import Transaction
from fiado.reports.formatting import format_currency


REMINDER_EMPTY_FALLBACK = "Não foi possível gerar a mensagem."
REMINDER_ERROR_FALLBACK = "Erro ao conectar com a IA para gerar mensagem."
ANALYSIS_EMPTY_FALLBACK = "Análise indisponível."
ANALYSIS_ERROR_FALLBACK = "Erro ao realizar análise de IA."


class ReminderTone(str, Enum):
    """Tone of a collection reminder."""
    POLITE = "polite"
    FIRM = "firm"
    FUNNY = "funny"

    @property
    def description(self) -> str:
        return _TONE_DESCRIPTIONS[self]


_TONE_DESCRIPTIONS = {
    ReminderTone.POLITE: "educado e amigável",
    ReminderTone.FIRM: "sério e profissional",
    ReminderTone.FUNNY: "engraçado e descontraído",
}


def _history_lines(transactions: Sequence[Transaction], empty_text: str) -> str:
    if not transactions:
        return empty_text
    return "\n".join(
        f"Data: {t.date.strftime('%d/%m/%Y')}, Valor: {format_currency(t.total_amount)}"
        for t in transactions
    )


class CollectionAgent:
    """
    AI agent that drafts collection messages and payment-behaviour notes.

    BOUNDARIES:
    - NEVER persists data
    - NEVER retries a failed request
    - ALWAYS returns text the shop owner can read
    """

    def __init__(self, model=None):
        """
        Args:
            model: Object exposing `generate_content_async(prompt)`.
                   If None, a Gemini model is configured from settings.
        """
        self._logger = structlog.get_logger(__name__)
        if model is None:
            self._settings = get_settings().gemini
            self._configure_genai()
        else:
            self._model = model

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
            }
        )

    async def _generate(self, prompt: str) -> Optional[str]:
        response = await self._model.generate_content_async(prompt)
        text = (response.text or "").strip()
        return text or None

    async def generate_reminder(
        self,
        debtor_name: str,
        total_debt: Decimal,
        tone: ReminderTone,
    ) -> str:
        """
        Draft a short WhatsApp message asking the debtor to settle up.

        Returns the generated text, or a fallback message on failure.
        """
        tone = ReminderTone(tone)
        prompt = f"""Você é um assistente financeiro de uma mercearia/loja local.
Escreva uma mensagem curta de WhatsApp cobrando o cliente.

Cliente: {debtor_name}
Valor devido: {format_currency(total_debt)}
Tom: {tone.value} ({tone.description})

A mensagem deve ser direta, citar o valor e sugerir que o cliente passe na loja para acertar.
Não use placeholders; escreva o texto final."""

        try:
            text = await self._generate(prompt)
        except Exception as e:
            self._logger.error(
                "reminder_generation_failed",
                error=str(e),
                tone=tone.value,
            )
            return REMINDER_ERROR_FALLBACK

        return text or REMINDER_EMPTY_FALLBACK

    async def analyze_payment_behavior(
        self,
        debtor_name: str,
        debts: Sequence[Transaction],
        payments: Sequence[Transaction],
    ) -> str:
        """
        Summarize how the debtor buys and pays, in at most three lines.

        `debts` and `payments` are the most recent entries of each kind.
        """
        prompt = f"""Analise o perfil deste cliente da caderneta de fiado.
Cliente: {debtor_name}

Últimas compras (dívidas):
{_history_lines(debts, "Nenhuma compra recente")}

Últimos pagamentos:
{_history_lines(payments, "Nenhum pagamento recente")}

Faça um resumo curto (no máximo 3 linhas) sobre o comportamento de pagamento
deste cliente e diga se vale a pena continuar vendendo fiado para ele.
Seja direto e um pouco informal."""

        try:
            text = await self._generate(prompt)
        except Exception as e:
            self._logger.error("analysis_generation_failed", error=str(e))
            return ANALYSIS_ERROR_FALLBACK

        return text or ANALYSIS_EMPTY_FALLBACK
