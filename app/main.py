"""
Streamlit Frontend for Fiado Digital

This is the screen the shop owner uses at the counter every day.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every entry is an explicit action (nothing is saved on its own)
3. Clear error messages in simple language
4. Visual feedback for all operations

All reads and writes go through LedgerBook; this module only renders
and collects input.
"""

import asyncio
from datetime import date

import streamlit as st

from fiado.agents import ReminderTone
from fiado.audit import configure_logging
from fiado.config import get_settings
from fiado.models.ledger import DebtorStatus, TransactionType
from fiado.orchestrator import AssistantFlow, LedgerBook, create_app_components
from fiado.reports import format_currency
from fiado.services.storage import (
    NotFoundError,
    ReferentialIntegrityError,
    StorageError,
)
from fiado.validation import RecordValidationError


# Page configuration
st.set_page_config(
    page_title="Fiado Digital",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
    .debt { color: #dc3545; font-weight: bold; }
    .credit { color: #28a745; font-weight: bold; }
</style>
""", unsafe_allow_html=True)


STATUS_BADGES = {
    DebtorStatus.OTIMO: "🟢",
    DebtorStatus.BOM: "🔵",
    DebtorStatus.REGULAR: "🟡",
    DebtorStatus.CALOTEIRO: "🔴",
}

TONE_LABELS = {
    ReminderTone.POLITE: "😊 Educado",
    ReminderTone.FIRM: "🧐 Sério",
    ReminderTone.FUNNY: "😂 Engraçado",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    configure_logging(get_settings().app.debug_mode)
    return create_app_components()


def status_badge(status) -> str:
    if status is None:
        return ""
    return f"{STATUS_BADGES[status]} {status.label}"


def show_validation_error(error: RecordValidationError):
    st.error(str(error))


def flash(message: str):
    """Queue a confirmation for the next run."""
    st.session_state["flash"] = message


def show_flash():
    message = st.session_state.pop("flash", None)
    if message:
        st.success(message)


def main():
    """Main application entry point."""
    try:
        book, assistant = get_components()
    except StorageError as e:
        st.error(f"Não foi possível abrir os dados da caderneta: {e}")
        st.stop()

    if "page" not in st.session_state:
        st.session_state.page = "📊 Painel"
    if "selected_debtor_id" not in st.session_state:
        st.session_state.selected_debtor_id = None

    # Sidebar navigation
    st.sidebar.title("📒 Fiado Digital")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navegar para:",
        ["📊 Painel", "👥 Clientes", "📦 Produtos", "⚙️ Configurações"],
        key="page",
    )

    st.sidebar.markdown("---")
    report = book.build_report()
    st.sidebar.download_button(
        "⬇️ Exportar relatório (CSV)",
        data=report.content,
        file_name=report.filename,
        mime=report.mime_type,
        on_click=book.mark_report_exported,
        args=(report,),
    )

    show_flash()

    # Route to appropriate page
    if page == "📊 Painel":
        render_dashboard_page(book)
    elif page == "👥 Clientes":
        if st.session_state.selected_debtor_id:
            render_debtor_details_page(book, assistant)
        else:
            render_debtors_page(book)
    elif page == "📦 Produtos":
        render_products_page(book)
    elif page == "⚙️ Configurações":
        render_settings_page()


def render_dashboard_page(book: LedgerBook):
    """Render the dashboard."""
    st.title("📊 Painel")

    stats = book.dashboard()

    col1, col2, col3 = st.columns(3)
    with col1:
        st.markdown("**Total a receber**")
        st.markdown(
            f'<div class="big-number">{format_currency(stats.total_outstanding)}</div>',
            unsafe_allow_html=True,
        )
    with col2:
        st.metric("Clientes", stats.total_debtors)
    with col3:
        st.metric("Produtos", stats.total_products)

    st.markdown("---")
    st.subheader("🏆 Maiores devedores")

    if stats.top_debtors:
        st.bar_chart(
            {row.debtor.name: float(row.balance) for row in stats.top_debtors},
        )
        for row in stats.top_debtors:
            st.markdown(f"- **{row.debtor.name}**: {format_currency(row.balance)}")
    else:
        st.info("Nenhum cliente cadastrado ainda.")

    st.subheader("🕒 Últimos lançamentos")
    names = {d.id: d.name for d in book.debtors}
    if not stats.recent_transactions:
        st.info("Nenhum lançamento ainda.")
    for t in stats.recent_transactions:
        st.markdown(
            f"- {t.date.strftime('%d/%m/%Y %H:%M')} · "
            f"**{names.get(t.debtor_id, 'Cliente removido')}** · {t.label} · "
            f"{format_currency(t.total_amount)}"
        )


def render_debtor_form(book: LedgerBook, debtor=None):
    """Add/edit customer form."""
    statuses = [None] + list(DebtorStatus)
    with st.form(f"debtor_form_{debtor.id if debtor else 'new'}", clear_on_submit=debtor is None):
        name = st.text_input("Nome *", value=debtor.name if debtor else "")
        phone = st.text_input("Telefone (WhatsApp) *", value=debtor.phone if debtor else "")
        status = st.selectbox(
            "Classificação",
            options=statuses,
            index=statuses.index(debtor.status) if debtor else 0,
            format_func=lambda s: "Sem classificação" if s is None else status_badge(s),
        )
        notes = st.text_area("Observações", value=(debtor.notes or "") if debtor else "")

        if st.form_submit_button("💾 Salvar", type="primary"):
            try:
                if debtor:
                    book.update_debtor(debtor.id, name, phone, status, notes)
                    flash("Cadastro atualizado!")
                else:
                    book.add_debtor(name, phone, status, notes)
                    flash("Cliente cadastrado!")
                st.rerun()
            except RecordValidationError as e:
                show_validation_error(e)


def render_debtors_page(book: LedgerBook):
    """Render the customer list."""
    st.title("👥 Clientes")

    with st.expander("➕ Novo cliente"):
        render_debtor_form(book)

    term = st.text_input("🔎 Buscar por nome ou telefone...")
    debtors = book.search_debtors(term)

    if not book.debtors:
        st.info("Nenhum cliente cadastrado. Use 'Novo cliente' para começar.")
        return
    if not debtors:
        st.warning("Nenhum cliente encontrado para esta busca.")
        return

    for debtor in debtors:
        balance = book.balance(debtor.id)
        col1, col2, col3 = st.columns([3, 2, 1])
        with col1:
            st.markdown(f"**{debtor.name}** {status_badge(debtor.status)}")
            st.caption(debtor.phone)
        with col2:
            css = "debt" if balance > 0 else "credit"
            st.markdown(
                f'<span class="{css}">{format_currency(balance)}</span>',
                unsafe_allow_html=True,
            )
        with col3:
            if st.button("Abrir", key=f"open_{debtor.id}"):
                st.session_state.selected_debtor_id = debtor.id
                st.rerun()


def render_debt_form(book: LedgerBook, debtor_id: str):
    """Cart form for a sale on credit."""
    cart_key = f"cart_{debtor_id}"
    if cart_key not in st.session_state:
        st.session_state[cart_key] = book.new_cart()
    cart = st.session_state[cart_key]

    products = book.products
    if not products:
        st.warning("Cadastre produtos antes de lançar uma venda.")
        return

    col1, col2, col3 = st.columns([3, 1, 1])
    with col1:
        product = st.selectbox(
            "Produto",
            options=products,
            format_func=lambda p: f"{p.name} - {format_currency(p.default_price)}",
        )
    with col2:
        qty = st.number_input("Qtd", min_value=1, value=1, step=1)
    with col3:
        if st.button("➕ Adicionar"):
            try:
                cart.add(product, int(qty))
            except RecordValidationError as e:
                show_validation_error(e)

    for idx, line in enumerate(cart.lines):
        c1, c2 = st.columns([4, 1])
        c1.markdown(f"{line.quantity}x {line.product.name} · {format_currency(line.total)}")
        if c2.button("🗑️", key=f"remove_{debtor_id}_{idx}"):
            cart.remove(idx)
            st.rerun()

    st.markdown(f"**Total: {format_currency(cart.total)}**")
    entry_date = st.date_input("Data", value=date.today(), key=f"debt_date_{debtor_id}")

    if st.button("✅ Lançar dívida", type="primary", disabled=cart.is_empty):
        try:
            book.record_debt(debtor_id, cart, entry_date)
            cart.clear()
            flash("Venda lançada!")
            st.rerun()
        except RecordValidationError as e:
            show_validation_error(e)


def render_payment_form(book: LedgerBook, debtor_id: str):
    """Payment form."""
    with st.form(f"payment_form_{debtor_id}", clear_on_submit=True):
        amount = st.text_input("Valor pago (R$) *", placeholder="0,00")
        method = st.selectbox("Forma de pagamento", options=book.payment_methods)
        entry_date = st.date_input("Data", value=date.today())

        if st.form_submit_button("✅ Baixar pagamento", type="primary"):
            try:
                book.record_payment(debtor_id, amount, method, entry_date)
                flash("Pagamento registrado!")
                st.rerun()
            except RecordValidationError as e:
                show_validation_error(e)


def render_assistant(assistant: AssistantFlow, debtor_id: str):
    """AI reminder / analysis panel."""
    reply_key = f"ai_reply_{debtor_id}"

    tone = st.radio(
        "Tom da mensagem",
        options=list(ReminderTone),
        format_func=lambda t: TONE_LABELS[t],
        horizontal=True,
    )

    col1, col2 = st.columns(2)
    with col1:
        if st.button("💬 Gerar cobrança", disabled=assistant.is_loading):
            with st.spinner("Escrevendo a mensagem..."):
                st.session_state[reply_key] = run_async(
                    assistant.request_reminder(debtor_id, tone)
                )
    with col2:
        if st.button("🤖 Analisar cliente", disabled=assistant.is_loading):
            with st.spinner("Analisando o histórico..."):
                st.session_state[reply_key] = run_async(
                    assistant.request_analysis(debtor_id)
                )

    reply = st.session_state.get(reply_key)
    if reply is not None:
        if reply.succeeded:
            st.text_area("Resposta da IA", value=reply.text, height=150)
        else:
            st.error(reply.text)


def render_debtor_details_page(book: LedgerBook, assistant: AssistantFlow):
    """Render one customer's account."""
    debtor_id = st.session_state.selected_debtor_id
    try:
        debtor = book.require_debtor(debtor_id)
    except NotFoundError:
        st.session_state.selected_debtor_id = None
        st.rerun()

    if st.button("⬅️ Voltar"):
        st.session_state.selected_debtor_id = None
        st.rerun()

    balance = book.balance(debtor.id)
    st.title(f"{debtor.name} {status_badge(debtor.status)}")
    st.caption(debtor.phone)
    st.markdown(
        f'<div class="big-number">{format_currency(balance)}</div>',
        unsafe_allow_html=True,
    )

    with st.expander("✏️ Editar cadastro"):
        render_debtor_form(book, debtor)
        if st.button("🗑️ Excluir cliente", key=f"delete_debtor_{debtor.id}"):
            try:
                book.delete_debtor(debtor.id)
                st.session_state.selected_debtor_id = None
                st.rerun()
            except ReferentialIntegrityError:
                st.error("Este cliente tem lançamentos e não pode ser excluído.")

    tab_debt, tab_payment, tab_ai = st.tabs(
        ["🛒 Lançar dívida", "💵 Baixar pagamento", "✨ Assistente"]
    )
    with tab_debt:
        render_debt_form(book, debtor.id)
    with tab_payment:
        render_payment_form(book, debtor.id)
    with tab_ai:
        render_assistant(assistant, debtor.id)

    st.markdown("---")
    st.subheader("📜 Extrato de movimentações")

    statement = book.statement(debtor.id)
    if not statement:
        st.info("Nenhuma movimentação registrada.")
    for t in statement:
        sign, css = ("-", "debt") if t.type == TransactionType.DEBT else ("+", "credit")
        st.markdown(
            f"**{t.label}** · {t.date.strftime('%d/%m/%Y às %H:%M')} "
            f'<span class="{css}">{sign} {format_currency(t.total_amount)}</span>',
            unsafe_allow_html=True,
        )
        if t.items:
            st.caption(t.items_summary)


def render_products_page(book: LedgerBook):
    """Render the product catalog."""
    st.title("📦 Produtos")

    with st.expander("➕ Novo produto"):
        with st.form("product_form_new", clear_on_submit=True):
            name = st.text_input("Nome *")
            price = st.text_input("Preço padrão (R$) *", placeholder="0,00")
            if st.form_submit_button("💾 Salvar", type="primary"):
                try:
                    book.add_product(name, price)
                    flash("Produto cadastrado!")
                    st.rerun()
                except RecordValidationError as e:
                    show_validation_error(e)

    if not book.products:
        st.info("Nenhum produto cadastrado.")

    for product in book.products:
        col1, col2, col3 = st.columns([3, 2, 1])
        col1.markdown(f"**{product.name}**")
        col2.markdown(format_currency(product.default_price))
        if col3.button("🗑️ Excluir", key=f"delete_{product.id}"):
            book.delete_product(product.id)
            st.rerun()

        with st.expander(f"✏️ Editar {product.name}"):
            with st.form(f"product_form_{product.id}"):
                name = st.text_input("Nome *", value=product.name)
                price = st.text_input("Preço padrão (R$) *", value=str(product.default_price))
                if st.form_submit_button("💾 Salvar"):
                    try:
                        book.update_product(product.id, name, price)
                        flash("Produto atualizado!")
                        st.rerun()
                    except RecordValidationError as e:
                        show_validation_error(e)


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Configurações")

    st.markdown("### Status")

    from fiado.config import validate_all_settings

    status = validate_all_settings()

    services = [
        ("Aplicação", "app"),
        ("Gemini (Assistente de IA)", "gemini"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configurado")
        else:
            error = status.get(f"{key}_error", "Não configurado")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuração")
    st.markdown(
        "Crie um arquivo `.env` com `GEMINI_API_KEY` para ativar o assistente. "
        "Os dados ficam na pasta definida por `DATA_DIR`."
    )


if __name__ == "__main__":
    main()
