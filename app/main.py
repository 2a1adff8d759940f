"""
Streamlit Frontend for BoutiqueBill

This is the screen the shop owner works in while the customer is at the
counter.

DESIGN PRINCIPLES:
1. One step at a time, with a visible step indicator
2. Errors shown next to the field that caused them
3. Totals always visible and always current
4. Nothing is sent or downloaded without an explicit click

The wizard lives in st.session_state. Widgets are bound to keys seeded
from the invoice draft; after each run the widget values are written back
through the wizard, which recomputes totals and the message.
"""

import html
from datetime import date
from typing import Any, Optional

import streamlit as st

from boutique_bill.config import get_settings, validate_all_settings
from boutique_bill.models.invoice import MeasurementName
from boutique_bill.orchestrator import InvoiceSession, create_app_components
from boutique_bill.services.export import PreviewUnavailableError
from boutique_bill.services.image import ImageRejectedError
from boutique_bill.services.messaging import MissingPhoneNumberError
from boutique_bill.totals import format_money
from boutique_bill.wizard import STEP_TITLES, STEPS, Step


# Page configuration
st.set_page_config(
    page_title="BoutiqueBill",
    page_icon="🧵",
    layout="centered",
)

# Custom CSS for the preview
st.markdown("""
<style>
    .invoice-box {
        padding: 24px;
        border: 1px solid #dee2e6;
        border-radius: 10px;
        background-color: #ffffff;
    }
    .invoice-box h1 {
        color: #7a306c;
        margin-bottom: 0;
    }
    .invoice-box table {
        width: 100%;
    }
    .muted {
        color: #6c757d;
        font-size: 0.85em;
    }
    .balance-row {
        font-weight: bold;
        color: #7a306c;
        font-size: 1.2em;
    }
</style>
""", unsafe_allow_html=True)


FIELD_PREFIX = "invoice__"


def get_components():
    """Get or create this browser session's components."""
    if "components" not in st.session_state:
        st.session_state.components = create_app_components()
    return st.session_state.components


# =============================================================================
# WIDGET BINDING
# =============================================================================

def _seed(key: str, value: Any) -> str:
    """Initialize a widget key from the draft the first time it's shown."""
    key = FIELD_PREFIX + key
    if key not in st.session_state:
        st.session_state[key] = value
    return key


def _clear_widget_keys(prefix: str = FIELD_PREFIX) -> None:
    for key in [k for k in st.session_state.keys() if str(k).startswith(prefix)]:
        del st.session_state[key]


def _value(key: str) -> Any:
    return st.session_state.get(FIELD_PREFIX + key)


def show_field_error(session: InvoiceSession, field: str) -> None:
    """Inline error under a field, if the last advance() flagged it."""
    result = session.wizard.last_validation
    if result is None:
        return
    message = result.message_for(field)
    if message:
        st.error(message)


def _upload_token(uploaded) -> str:
    return f"{uploaded.name}:{uploaded.size}"


# =============================================================================
# PAGES
# =============================================================================

def render_login_page(auth_service) -> None:
    st.title("🧵 BoutiqueBill")
    st.markdown("Please log in to create invoices.")

    with st.form("login"):
        email = st.text_input("Email", placeholder="user@example.com")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in", type="primary")

    if submitted:
        if auth_service.login(email, password):
            st.rerun()
        else:
            st.error("Invalid email or password.")


def render_step_indicator(session: InvoiceSession) -> None:
    current = session.wizard.current_step
    columns = st.columns(len(STEPS))
    for column, step in zip(columns, STEPS):
        if current > step:
            label = f"✅ {STEP_TITLES[step]}"
        elif current == step:
            label = f"**{step + 1}. {STEP_TITLES[step]}**"
        else:
            label = f"{step + 1}. {STEP_TITLES[step]}"
        column.markdown(label)
    st.progress(current / (len(STEPS) - 1))


def render_shop_step(session: InvoiceSession) -> None:
    invoice = session.invoice

    st.text_input(
        "Shop Name *",
        key=_seed("shop_name", invoice.shop_name),
        max_chars=200,
        placeholder="e.g. Anjali Designer Studio",
    )
    show_field_error(session, "shop_name")

    st.text_area(
        "Shop Address *",
        key=_seed("shop_address", invoice.shop_address),
        max_chars=500,
        placeholder="e.g. 12 MG Road, Bengaluru 560001",
    )
    show_field_error(session, "shop_address")

    st.text_input(
        "Invoice Number *",
        key=_seed("invoice_number", invoice.invoice_number),
        max_chars=50,
    )
    show_field_error(session, "invoice_number")

    session.wizard.update(
        shop_name=_value("shop_name"),
        shop_address=_value("shop_address"),
        invoice_number=_value("invoice_number"),
    )

    formats = get_settings().app.supported_formats_list
    logo = st.file_uploader("Shop Logo (optional)", type=formats)
    if logo is not None and st.session_state.get("logo_token") != _upload_token(logo):
        try:
            session.attach_logo(logo.getvalue(), logo.name, logo.type)
            st.session_state.logo_token = _upload_token(logo)
        except ImageRejectedError as e:
            st.error(str(e))
    if invoice.shop_logo:
        st.image(invoice.shop_logo, width=120)


def render_customer_step(session: InvoiceSession) -> None:
    invoice = session.invoice

    col1, col2 = st.columns(2)
    with col1:
        st.text_input(
            "Customer Name *",
            key=_seed("customer_name", invoice.customer_name),
            max_chars=200,
            placeholder="e.g. Anjali Sharma",
        )
        show_field_error(session, "customer_name")

        st.date_input(
            "Invoice Date *",
            key=_seed("invoice_date", invoice.invoice_date),
            max_value=date.today(),
        )
        show_field_error(session, "invoice_date")

    with col2:
        st.text_input(
            "Customer Phone (with country code) *",
            key=_seed("customer_phone", invoice.customer_phone),
            max_chars=30,
            placeholder="e.g. 919876543210",
        )
        show_field_error(session, "customer_phone")

        st.date_input(
            "Delivery Date *",
            key=_seed("delivery_date", invoice.delivery_date),
        )
        show_field_error(session, "delivery_date")

    session.wizard.update(
        customer_name=_value("customer_name"),
        customer_phone=_value("customer_phone"),
        invoice_date=_value("invoice_date"),
        delivery_date=_value("delivery_date"),
    )


def render_reference_image(session: InvoiceSession, index: int) -> None:
    app_settings = get_settings().app
    service = session.invoice.services[index]
    token_key = f"reference_token_{index}"

    source = None
    if app_settings.camera_enabled:
        if st.toggle("Use camera", key=f"{FIELD_PREFIX}camera_{index}"):
            source = st.camera_input("Take a reference photo", key=f"{FIELD_PREFIX}capture_{index}")
            st.caption("If your browser blocks the camera, switch this off and upload a photo instead.")
    else:
        st.warning("Camera capture is not available. Please upload a photo instead.")

    if source is None:
        source = st.file_uploader(
            "Reference image (optional)",
            type=app_settings.supported_formats_list,
            key=f"{FIELD_PREFIX}upload_{index}",
        )

    if source is not None and st.session_state.get(token_key) != _upload_token(source):
        try:
            session.attach_reference_image(index, source.getvalue(), source.name, source.type)
            st.session_state[token_key] = _upload_token(source)
        except ImageRejectedError as e:
            st.error(str(e))

    if service.reference_image:
        st.image(service.reference_image, width=200)
        if st.button("Remove image", key=f"remove_image_{index}"):
            session.wizard.set_reference_image(index, None)
            st.session_state.pop(token_key, None)
            st.rerun()


def render_measurements(session: InvoiceSession, index: int) -> None:
    unit = get_settings().app.measurement_unit
    service = session.invoice.services[index]

    st.markdown(f"**Measurements ({unit})**")
    for m_index, measurement in enumerate(service.measurements):
        base = f"service_{index}_measurement_{m_index}"
        col1, col2, col3 = st.columns([3, 2, 1])
        with col1:
            st.selectbox(
                "Measurement",
                options=list(MeasurementName),
                format_func=lambda m: m.value,
                key=_seed(f"{base}_name", measurement.name),
                label_visibility="collapsed",
            )
        with col2:
            st.number_input(
                "Value",
                key=_seed(f"{base}_value", float(measurement.value)),
                step=0.5,
                label_visibility="collapsed",
            )
        with col3:
            if st.button("🗑️", key=f"remove_{base}"):
                session.wizard.remove_measurement(index, m_index)
                _clear_widget_keys(f"{FIELD_PREFIX}service_{index}_measurement_")
                st.rerun()
        show_field_error(session, f"services.{index}.measurements.{m_index}.value")

        session.wizard.update_measurement(
            index,
            m_index,
            name=_value(f"{base}_name"),
            value=_value(f"{base}_value"),
        )

    if st.button("➕ Add Measurement", key=f"add_measurement_{index}"):
        session.wizard.add_measurement(index)
        st.rerun()


def render_services_step(session: InvoiceSession) -> None:
    services = session.invoice.services

    for index, service in enumerate(services):
        with st.expander(f"Service {index + 1}: {service.name or 'New service'}", expanded=True):
            base = f"service_{index}"
            col1, col2 = st.columns([3, 1])
            with col1:
                st.text_input(
                    "Service *",
                    key=_seed(f"{base}_name", service.name),
                    max_chars=200,
                    placeholder="e.g. Blouse Stitching",
                )
                show_field_error(session, f"services.{index}.name")
                st.text_input(
                    "Description",
                    key=_seed(f"{base}_description", service.description or ""),
                    max_chars=500,
                    placeholder="e.g. with lining",
                )
            with col2:
                st.number_input(
                    f"Price ({get_settings().app.currency_symbol})",
                    key=_seed(f"{base}_price", float(service.price)),
                    step=50.0,
                    format="%.2f",
                )
                show_field_error(session, f"services.{index}.price")

            session.wizard.update_service(
                index,
                name=_value(f"{base}_name"),
                description=_value(f"{base}_description"),
                price=_value(f"{base}_price"),
            )

            render_measurements(session, index)
            render_reference_image(session, index)

            if st.button("Remove Service", key=f"remove_service_{index}", disabled=len(services) <= 1):
                session.remove_service(index)
                _clear_widget_keys(f"{FIELD_PREFIX}service_")
                st.rerun()

    if st.button("➕ Add Service"):
        session.add_service()
        st.rerun()

    show_field_error(session, "services")
    st.metric("Total", format_money(session.wizard.totals.total))


def render_details_step(session: InvoiceSession) -> None:
    invoice = session.invoice

    st.number_input(
        f"Advance Paid ({get_settings().app.currency_symbol})",
        key=_seed("advance", float(invoice.advance)),
        step=100.0,
        format="%.2f",
    )
    show_field_error(session, "advance")

    st.text_area(
        "Notes",
        key=_seed("notes", invoice.notes or ""),
        max_chars=2000,
        placeholder="e.g. Use golden thread...",
        help="Optional: any special instructions.",
    )
    show_field_error(session, "notes")

    session.wizard.update(advance=_value("advance"), notes=_value("notes"))

    totals = session.wizard.totals
    col1, col2, col3 = st.columns(3)
    col1.metric("Total", format_money(totals.total))
    col2.metric("Advance", format_money(totals.advance))
    col3.metric("Balance Due", format_money(totals.balance))


def render_preview_html(session: InvoiceSession) -> str:
    preview = session.preview()
    esc = html.escape

    logo = (
        f'<img src="{preview.shop_logo}" style="max-height:64px;"/><br/>'
        if preview.shop_logo else ""
    )

    rows = []
    for row in preview.rows:
        detail = ""
        if row.description:
            detail += f'<div class="muted">{esc(row.description)}</div>'
        if row.measurements:
            detail += f'<div class="muted">{esc(", ".join(row.measurements))}</div>'
        rows.append(
            f"<tr><td>{esc(row.name)}{detail}</td>"
            f'<td style="text-align:right">{esc(row.price)}</td></tr>'
        )

    notes = (
        f"<h4>Notes:</h4><p style='white-space:pre-wrap'>{esc(preview.notes)}</p>"
        if preview.notes else ""
    )

    return f"""
    <div class="invoice-box">
        <table><tr>
            <td>
                <h1>INVOICE</h1>
                <div class="muted">Invoice No: {esc(preview.invoice_number)}</div>
                <div class="muted">Invoice Date: {esc(preview.invoice_date)}</div>
            </td>
            <td style="text-align:right">
                {logo}<strong>{esc(preview.shop_name)}</strong>
                <div class="muted">{esc(preview.shop_address)}</div>
            </td>
        </tr></table>
        <hr/>
        <table><tr>
            <td><strong>Bill To:</strong><br/>{esc(preview.customer_name)}<br/>
                Phone: {esc(preview.customer_phone)}</td>
            <td style="text-align:right"><strong>Delivery Date:</strong><br/>
                {esc(preview.delivery_date)}</td>
        </tr></table>
        <table>
            <tr><th>Service Description</th><th style="text-align:right">Price</th></tr>
            {''.join(rows)}
            <tr><td><strong>Total</strong></td>
                <td style="text-align:right"><strong>{esc(preview.total)}</strong></td></tr>
            <tr><td>Advance Paid</td><td style="text-align:right">{esc(preview.advance)}</td></tr>
            <tr class="balance-row"><td>Balance Due</td>
                <td style="text-align:right">{esc(preview.balance)}</td></tr>
        </table>
        {notes}
    </div>
    """


def render_preview_step(session: InvoiceSession) -> None:
    st.markdown(render_preview_html(session), unsafe_allow_html=True)

    st.text_area(
        "WhatsApp Message",
        key=_seed("message", session.wizard.message),
        height=260,
    )
    session.wizard.edit_message(_value("message"))

    col1, col2 = st.columns(2)
    with col1:
        if st.button("🖨️ Prepare PDF", use_container_width=True):
            try:
                st.session_state.exported = session.export_pdf()
            except PreviewUnavailableError as e:
                st.error(str(e))
        exported = st.session_state.get("exported")
        if exported is not None:
            st.download_button(
                "⬇️ Download PDF",
                data=exported.content,
                file_name=exported.filename,
                mime=exported.mime_type,
                use_container_width=True,
            )

    with col2:
        if st.button("📱 Send on WhatsApp", type="primary", use_container_width=True):
            try:
                st.session_state.whatsapp_url = session.messaging_url()
            except MissingPhoneNumberError as e:
                st.session_state.whatsapp_url = None
                st.error(str(e))
        url: Optional[str] = st.session_state.get("whatsapp_url")
        if url:
            st.link_button("Open WhatsApp", url, use_container_width=True)


STEP_RENDERERS = {
    Step.SHOP_INFO: render_shop_step,
    Step.CUSTOMER_INFO: render_customer_step,
    Step.SERVICES: render_services_step,
    Step.DETAILS: render_details_step,
    Step.PREVIEW: render_preview_step,
}


def render_wizard(session: InvoiceSession) -> None:
    wizard = session.wizard

    st.header(wizard.title)
    render_step_indicator(session)
    st.markdown("---")

    STEP_RENDERERS[wizard.step](session)

    st.markdown("---")
    col1, col2 = st.columns(2)
    with col1:
        if not wizard.is_first_step and st.button("⬅️ Back", use_container_width=True):
            session.retreat()
            # A prepared PDF or link would no longer match the draft
            for key in ("exported", "whatsapp_url"):
                st.session_state.pop(key, None)
            st.rerun()
    with col2:
        if not wizard.is_last_step:
            if st.button("Next ➡️", type="primary", use_container_width=True):
                if session.advance():
                    _clear_widget_keys(FIELD_PREFIX + "message")
                st.rerun()
        elif st.button("🆕 New Invoice", use_container_width=True):
            session.new_invoice()
            _clear_widget_keys()
            for key in ("exported", "whatsapp_url", "logo_token"):
                st.session_state.pop(key, None)
            st.rerun()

    if wizard.last_validation is not None and wizard.last_validation.warnings:
        for warning in wizard.last_validation.warnings:
            st.warning(warning)


def render_sidebar(session: InvoiceSession, auth_service, audit_logger) -> None:
    user = auth_service.current_user()
    st.sidebar.title("🧵 BoutiqueBill")
    if user:
        st.sidebar.markdown(f"Logged in as **{user.email}**")
    if st.sidebar.button("Logout"):
        auth_service.logout()
        st.rerun()

    st.sidebar.markdown("---")
    with st.sidebar.expander("📜 Activity"):
        for event in reversed(audit_logger.events[-15:]):
            st.markdown(f"- {event.timestamp:%H:%M:%S} {event.description}")

    with st.sidebar.expander("⚙️ Settings"):
        st.caption(f"Environment: {get_settings().app.app_environment}")
        status = validate_all_settings()
        for name in ("app", "export", "auth", "shop"):
            if status.get(name, False):
                st.success(f"✅ {name}")
            else:
                st.error(f"❌ {name} - {status.get(f'{name}_error', 'Not configured')}")


def main():
    """Main application entry point."""
    session, auth_service, audit_logger = get_components()

    if not auth_service.is_authenticated():
        render_login_page(auth_service)
        return

    render_sidebar(session, auth_service, audit_logger)
    try:
        render_wizard(session)
    except Exception as e:
        session.report_error(e, action="render")
        if get_settings().app.debug_mode:
            st.exception(e)
        else:
            st.error("Something went wrong. Go back a step or start a new invoice.")


if __name__ == "__main__":
    main()
