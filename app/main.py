"""
Streamlit Frontend for PINEE

The screens a user looks at every day: the home balances, the
transaction list for a period and the CSV export.

DESIGN PRINCIPLES:
1. Balances first, always visible at the top
2. One period selector drives every screen
3. Row actions (edit, delete, toggle status) are explicit buttons
4. Clear error messages in Portuguese
"""

import asyncio
from datetime import date
from decimal import Decimal

import streamlit as st

from pinee.export import ExportError
from pinee.models.transaction import PeriodFilter, TransactionRecord, TransactionType
from pinee.orchestrator import (
    BalanceFlow,
    TransactionFlow,
    build_item_view,
    create_app_components,
)
from pinee.periods import DateRangeProvider, InvalidDateRangeError
from pinee.presentation import RowColor, format_currency, format_percentage
from pinee.services.storage import StorageError
from pinee.transactions import StatusToggleNotAllowedError, TransferError


# Page configuration
st.set_page_config(
    page_title="PINEE",
    page_icon="🍍",
    layout="wide",
    initial_sidebar_state="expanded",
)

ROW_COLORS = {
    RowColor.BLUE: "#1e6fd9",
    RowColor.GREEN: "#28a745",
    RowColor.RED: "#dc3545",
}

PERIOD_LABELS = {
    PeriodFilter.DAILY: "Dia",
    PeriodFilter.WEEKLY: "Semana",
    PeriodFilter.MONTHLY: "Mês",
    PeriodFilter.YEARLY: "Ano",
    PeriodFilter.CUSTOM: "Personalizado",
    PeriodFilter.ALL_TIME: "Todo o período",
}

st.markdown("""
<style>
    .balance-card {
        padding: 20px;
        border-radius: 10px;
        background-color: #f4f6f8;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)


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
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Falha ao inicializar: {e}")
        return create_app_components(use_storage=False)


def main():
    """Main application entry point."""
    balance_flow, transaction_flow, provider, _ = get_components()

    st.sidebar.title("🍍 PINEE")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navegar para:",
        ["🏠 Início", "📋 Transações", "⚙️ Configurações"],
        index=0,
    )

    st.sidebar.markdown("---")
    render_period_selector(provider)

    if page == "🏠 Início":
        render_home_page(balance_flow)
    elif page == "📋 Transações":
        render_transactions_page(transaction_flow)
    elif page == "⚙️ Configurações":
        render_settings_page()


def render_period_selector(provider: DateRangeProvider):
    """Sidebar period filter with previous/next navigation."""
    periods = list(PeriodFilter)
    period = st.sidebar.selectbox(
        "Período",
        periods,
        index=periods.index(provider.period),
        format_func=lambda p: PERIOD_LABELS[p],
    )

    if period == PeriodFilter.CUSTOM:
        start = st.sidebar.date_input("Início", value=provider.custom_start or date.today())
        end = st.sidebar.date_input("Fim", value=provider.custom_end or date.today())
        try:
            provider.set_custom_range(start, end)
        except InvalidDateRangeError:
            st.sidebar.error("A data final deve ser igual ou posterior à inicial.")
    elif period != provider.period:
        provider.select_period(period)

    col_prev, col_label, col_next = st.sidebar.columns([1, 3, 1])
    navigable = provider.period != PeriodFilter.ALL_TIME
    with col_prev:
        if st.button("◀", disabled=not navigable):
            provider.previous_period()
            st.rerun()
    with col_next:
        if st.button("▶", disabled=not navigable):
            provider.next_period()
            st.rerun()
    with col_label:
        st.markdown(f"**{provider.get_current_date_range().display_text}**")


def render_home_page(balance_flow: BalanceFlow):
    """Render the home page with the balance cards."""
    st.title("🏠 Início")

    try:
        result = run_async(balance_flow.consolidated_balance())
        projected = run_async(balance_flow.projected_totals())
    except StorageError as e:
        st.error(f"Erro ao carregar transações: {e}")
        return

    col1, col2 = st.columns(2)
    with col1:
        st.markdown(f"""
        <div class="balance-card">
            <p>Saldo consolidado</p>
            <p class="big-number">{format_currency(result.consolidated_balance)}</p>
        </div>
        """, unsafe_allow_html=True)
    with col2:
        st.markdown(f"""
        <div class="balance-card">
            <p>Investido</p>
            <p class="big-number" style="color: {ROW_COLORS[RowColor.BLUE]}">
                {format_currency(result.invested_balance)}
            </p>
        </div>
        """, unsafe_allow_html=True)

    st.markdown("---")
    st.subheader("Previsto no período")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Receitas", format_currency(projected.income))
    with col2:
        st.metric("Despesas", format_currency(projected.expense))
    with col3:
        st.metric("Saldo", format_currency(projected.balance))

    if result.skipped:
        with st.expander(f"⚠️ {result.skipped_count} transação(ões) ignorada(s)"):
            for item in result.skipped:
                st.markdown(f"- `{item.document_id or '?'}`: {item.message}")


def render_transactions_page(transaction_flow: TransactionFlow):
    """Render the transaction list for the selected period."""
    st.title("📋 Transações")

    try:
        records, _ = run_async(transaction_flow.load_transactions())
    except StorageError as e:
        st.error(f"Erro ao carregar transações: {e}")
        return

    render_export_button(transaction_flow)
    render_new_transaction_form(transaction_flow)
    render_category_breakdown(transaction_flow)

    if not records:
        st.info("Nenhuma transação neste período.")
        return

    for record in records:
        render_transaction_row(transaction_flow, record)


def render_transaction_row(transaction_flow: TransactionFlow, record: TransactionRecord):
    """One list row with its actions."""
    view = build_item_view(record)
    color = ROW_COLORS[view.style.amount_color]

    col_main, col_amount, col_toggle, col_delete = st.columns([5, 2, 1, 1])
    with col_main:
        st.markdown(f"**{view.title}**  \n{view.category} · {view.date}")
    with col_amount:
        st.markdown(
            f"<span style='color: {color}; font-weight: bold'>{view.amount}</span>",
            unsafe_allow_html=True,
        )
    with col_toggle:
        if st.button("🔁", key=f"toggle_{record.id}", help=f"Status: {record.status}"):
            try:
                run_async(transaction_flow.toggle_status(record.id))
                st.rerun()
            except StatusToggleNotAllowedError as e:
                st.warning(str(e))
    with col_delete:
        if st.button("🗑️", key=f"delete_{record.id}"):
            run_async(transaction_flow.delete_transaction(record.id))
            st.rerun()

    if record.type == TransactionType.INCOME:
        render_transfer_form(transaction_flow, record)


def render_transfer_form(transaction_flow: TransactionFlow, record: TransactionRecord):
    """Move part or all of an income into an investment."""
    with st.expander("💰 Transferir para investimento"):
        with st.form(f"transfer_{record.id}"):
            amount = st.number_input(
                "Valor", min_value=0.0, max_value=float(record.amount),
                value=float(record.amount), step=10.0,
            )
            title = st.text_input("Descrição", value=f"Investimento - {record.title}")
            category = st.text_input("Categoria")
            if st.form_submit_button("Transferir"):
                try:
                    run_async(transaction_flow.transfer_to_investment(
                        record.id,
                        Decimal(str(amount)),
                        title,
                        category=category,
                    ))
                    st.rerun()
                except TransferError as e:
                    st.error(str(e))


def render_category_breakdown(transaction_flow: TransactionFlow):
    """Income and expense per category, with shares."""
    breakdown = run_async(transaction_flow.category_breakdown())
    with st.expander("📊 Por categoria"):
        col1, col2 = st.columns(2)
        for column, label, items in (
            (col1, "Receitas", breakdown.income),
            (col2, "Despesas", breakdown.expense),
        ):
            with column:
                st.markdown(f"**{label}**")
                for item in items:
                    st.markdown(
                        f"- {item.category}: {format_currency(item.total)} "
                        f"({format_percentage(item.percentage)})"
                    )


def render_new_transaction_form(transaction_flow: TransactionFlow):
    """Form to add a transaction."""
    with st.expander("➕ Nova transação"):
        with st.form("new_transaction"):
            title = st.text_input("Título")
            amount = st.number_input("Valor (R$)", min_value=0.0, step=0.01, format="%.2f")
            category = st.text_input("Categoria")
            day = st.date_input("Data", value=date.today())
            kind = st.selectbox(
                "Tipo",
                list(TransactionType),
                format_func=lambda t: {
                    TransactionType.INCOME: "Receita",
                    TransactionType.EXPENSE: "Despesa",
                    TransactionType.INVESTMENT: "Investimento",
                }[t],
            )

            if st.form_submit_button("💾 Salvar", type="primary"):
                status = {
                    TransactionType.INCOME: "pending",
                    TransactionType.EXPENSE: "unpaid",
                    TransactionType.INVESTMENT: "pending",
                }[kind]
                record = TransactionRecord(
                    title=title or "Sem título",
                    amount=Decimal(str(amount)),
                    category=category,
                    date=day,
                    type=kind,
                    status=status,
                    is_income=kind == TransactionType.INCOME,
                )
                run_async(transaction_flow.save_transaction(record))
                st.success("✅ Transação salva!")
                st.rerun()


def render_export_button(transaction_flow: TransactionFlow):
    if st.button("📤 Exportar CSV"):
        try:
            file_path = run_async(transaction_flow.export_csv())
        except ExportError as e:
            st.error(str(e))
            return
        st.download_button(
            "⬇️ Baixar arquivo",
            data=file_path.read_bytes(),
            file_name=file_path.name,
            mime="text/csv",
        )


def render_settings_page():
    """Render settings page."""
    st.title("⚙️ Configurações")

    from pinee.config import validate_all_settings

    status = validate_all_settings()

    services = [
        ("Google Sheets (Armazenamento)", "google_sheets"),
        ("Aplicação", "app"),
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
        "Crie um arquivo `.env` com as variáveis `GOOGLE_SHEETS_*` e `PINEE_*`. "
        "Sem Google Sheets, os dados ficam apenas em memória."
    )


if __name__ == "__main__":
    main()
