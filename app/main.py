"""
Streamlit Frontend for Registro Contable

The one screen the user works with: balance, the entry form, the
list of records, CSV export and support receipts.

DESIGN PRINCIPLES:
1. One status line, always showing the latest event
2. The form fields depend on the selected category
3. The list and the balance always come from the latest snapshot
4. No hidden actions: every write is a button press
"""

import asyncio
from html import escape

import streamlit as st

from registro_contable.config import validate_all_settings
from registro_contable.export import build_receipt
from registro_contable.ledger import format_money, present_entry, sort_for_display
from registro_contable.models import Category
from registro_contable.orchestrator import (
    LedgerFlow,
    RecordFormController,
    create_app_components,
)
from registro_contable.session import SessionContext, SessionInitError
from registro_contable.status import MSG_INIT_FAILED, MSG_RECEIPT_READY


# Page configuration
st.set_page_config(
    page_title="Registro Contable",
    page_icon="📒",
    layout="centered",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .balance-box {
        padding: 16px;
        background: linear-gradient(90deg, #3b82f6, #14b8a6);
        color: white;
        border-radius: 10px;
        text-align: center;
        margin-bottom: 16px;
    }
    .balance-box .big-number {
        font-size: 2.5em;
        font-weight: 800;
    }
    .entry-ingreso { background-color: #f0fdf4; }
    .entry-gasto { background-color: #fef2f2; }
    .entry-apoyo { background-color: #eff6ff; }
    .entry {
        padding: 12px;
        border-radius: 8px;
        margin: 8px 0;
    }
    .positive { color: #16a34a; font-weight: bold; }
    .negative { color: #dc2626; font-weight: bold; }
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


def get_components() -> tuple[SessionContext, RecordFormController, LedgerFlow]:
    """Get or create this browser session's components."""
    if "components" not in st.session_state:
        session, controller, ledger = create_app_components()
        ledger.start()
        st.session_state.components = (session, controller, ledger)
        st.session_state.form_nonce = 0
    return st.session_state.components


def bump_form() -> None:
    """Make the form widgets pick up the controller's fresh defaults."""
    st.session_state.form_nonce += 1
    st.session_state.pop("pending_receipt", None)
    st.session_state.pop("pending_export", None)


def main():
    """Main application entry point."""
    st.title("Registro Contable")

    try:
        session, controller, ledger = get_components()
    except SessionInitError:
        st.error(MSG_INIT_FAILED)
        st.stop()

    run_async(ledger.refresh())

    if session.user_id:
        st.caption(f"Tu ID de usuario: **{session.user_id}**")

    render_settings_status(session)
    render_balance(ledger)
    render_status(controller)
    render_form(controller)
    render_entries(session, controller, ledger)


def render_settings_status(session: SessionContext):
    """Sidebar report of which configuration sections load."""
    status = validate_all_settings()
    sections = [
        ("Identidad", "identity"),
        ("Aplicación", "app"),
    ]
    if session.app_settings.storage_backend == "google_sheets":
        sections.insert(0, ("Google Sheets", "google_sheets"))

    with st.sidebar:
        st.markdown("### Configuración")
        for name, key in sections:
            if status.get(key, False):
                st.success(f"✅ {name}")
            else:
                error = status.get(f"{key}_error", "Sin configurar")
                st.error(f"❌ {name} - {error}")


def render_balance(ledger: LedgerFlow):
    st.markdown(f"""
    <div class="balance-box">
        <div>Balance Actual:</div>
        <div class="big-number">{format_money(ledger.balance)}</div>
    </div>
    """, unsafe_allow_html=True)


def render_status(controller: RecordFormController):
    status = controller.status
    if not status.text:
        return
    if status.level == "error":
        st.error(status.text)
    elif status.level == "success":
        st.success(status.text)
    else:
        st.info(status.text)


def render_form(controller: RecordFormController):
    """Render the entry form for the selected category."""
    st.subheader("Añadir Nuevo Registro")

    categories = list(Category)
    category = st.radio(
        "Tipo",
        options=categories,
        index=categories.index(controller.category),
        format_func=lambda c: c.label,
        horizontal=True,
        label_visibility="collapsed",
    )
    if category != controller.category:
        controller.set_category(category)
        bump_form()
        st.rerun()

    form = controller.form
    key = f"{form.category.value}_{st.session_state.form_nonce}"

    controller.set_counterparty_name(st.text_input(
        form.counterparty_label,
        value=form.counterparty_name,
        placeholder=form.counterparty_placeholder,
        key=f"name_{key}",
    ))
    controller.set_description(st.text_input(
        form.description_label,
        value=form.description,
        placeholder=form.description_placeholder,
        key=f"description_{key}",
    ))
    controller.set_amount(st.text_input(
        "Monto",
        value=form.amount,
        placeholder="00.00 MXN",
        key=f"amount_{key}",
    ))

    methods = list(form.allowed_payment_methods())
    controller.set_payment_method(st.radio(
        form.payment_method_label,
        options=methods,
        index=methods.index(form.payment_method),
        format_func=lambda m: m.value,
        horizontal=True,
        key=f"method_{key}",
    ))
    controller.set_entry_date(st.date_input(
        "Fecha:",
        value=form.entry_date,
        key=f"date_{key}",
    ))

    if form.category is Category.EXPENSE:
        render_attachment(controller, key)

    if form.category is Category.SUPPORT:
        render_receipt_preview(controller)

    if st.button("Añadir Registro", type="primary"):
        record = run_async(controller.submit())
        if record is not None:
            bump_form()
        st.rerun()


def render_attachment(controller: RecordFormController, key: str):
    """Expense receipts: only the chosen file name is reported."""
    uploaded = st.file_uploader(
        "Adjuntar Recibo",
        type=["jpg", "jpeg", "png", "gif", "pdf"],
        key=f"attachment_{key}",
    )
    name = uploaded.name if uploaded else None
    if name != st.session_state.get("last_attachment"):
        st.session_state.last_attachment = name
        controller.note_attachment(name)
        st.rerun()


def render_receipt_preview(controller: RecordFormController):
    if st.button("Generar Recibo"):
        st.session_state.pending_receipt = controller.preview_receipt()
        st.rerun()

    receipt = st.session_state.get("pending_receipt")
    if receipt is not None:
        st.download_button(
            f"Descargar {receipt.filename}",
            data=receipt.data,
            file_name=receipt.filename,
            mime=receipt.mime_type,
        )


def render_entries(
    session: SessionContext,
    controller: RecordFormController,
    ledger: LedgerFlow,
):
    """Render the records list, most recent first."""
    st.markdown("---")
    st.subheader("Mis Registros")

    records = sort_for_display(ledger.records)
    if not records:
        st.markdown("No hay registros todavía. ¡Añade uno!")

    currency = session.app_settings.currency
    for record in records:
        entry = present_entry(record)
        amount_class = "positive" if entry.is_positive else "negative"
        col1, col2 = st.columns([5, 1])

        with col1:
            st.markdown(f"""
            <div class="entry entry-{entry.category.value}">
                <strong>{escape(entry.description)}</strong><br>
                <span class="{amount_class}">{entry.amount_text}</span><br>
                <small>{escape(entry.counterparty_text)} | Fecha: {entry.date_text}</small><br>
                <small>{entry.payment_method_text}</small>
            </div>
            """, unsafe_allow_html=True)

        with col2:
            if st.button("🗑️", key=f"delete_{entry.id}", help="Eliminar registro"):
                if run_async(controller.delete(entry.id)):
                    st.session_state.pop("pending_export", None)
                    run_async(ledger.refresh())
                st.rerun()
            if entry.can_generate_receipt:
                receipt = build_receipt(record, currency)
                st.download_button(
                    "🧾",
                    data=receipt.data,
                    file_name=receipt.filename,
                    mime=receipt.mime_type,
                    key=f"receipt_{entry.id}",
                    help="Descargar recibo",
                    on_click=controller.status.success,
                    args=(MSG_RECEIPT_READY,),
                )

    if st.button("Exportar a CSV"):
        st.session_state.pending_export = ledger.export_csv()
        st.rerun()

    export = st.session_state.get("pending_export")
    if export is not None:
        st.download_button(
            f"Descargar {export.filename}",
            data=export.data,
            file_name=export.filename,
            mime=export.mime_type,
        )


if __name__ == "__main__":
    main()
