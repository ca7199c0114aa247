"""
ShopBot Streamlit App - Storefront with a shopping assistant

Run with: streamlit run app.py

Architecture:
- This file: Streamlit UI only
- core/orchestrator.py: Turn processing coordination
- handlers/: Cart-action and conversation handlers
- core/: Classification, referents, relevance, cart, catalog
- llm/: Prompt composition and provider backends
- ui/: Response formatting and session helpers
"""

import asyncio
import dataclasses

import streamlit as st

from catalog_loader import get_catalog_statistics, load_catalog
from config.settings import Settings, load_settings
from core.catalog import Catalog
from core.context import Product, TurnRole
from core.conversation_csv import init_conversation_logger
from core.errors import CartError
from core.gsheets_logger import init_gsheets_logger
from core.orchestrator import DialogueOrchestrator, OrchestratorComponents, create_components
from core.structured_logging import get_logger, setup_logging
from llm.providers import build_backends
from ui.responses import QUICK_SUGGESTIONS, get_response_formatter
from ui.state import chat_role, get_session_objects, reset_conversation, session_summary, visible_turns


# =============================================================================
# CONFIGURATION
# =============================================================================

SECRET_SETTINGS = {
    "GEMINI_API_KEY": "gemini_api_key",
    "ANTHROPIC_API_KEY": "anthropic_api_key",
    "GEMINI_MODEL": "gemini_model",
    "ANTHROPIC_MODEL": "anthropic_model",
    "CATALOG_PATH": "catalog_path",
    "gsheets_spreadsheet_id": "gsheets_spreadsheet_id",
}


def _load_app_settings() -> Settings:
    """Environment settings, overlaid with Streamlit secrets when present."""
    settings = load_settings()
    try:
        overrides = {
            field_name: st.secrets[key]
            for key, field_name in SECRET_SETTINGS.items()
            if key in st.secrets
        }
    except FileNotFoundError:
        return settings
    return dataclasses.replace(settings, **overrides) if overrides else settings


settings = _load_app_settings()

setup_logging(
    log_dir=settings.log_dir,
    console_level=20,  # INFO
    file_level=10,     # DEBUG
    enable_console=True,
    enable_file=True,
    enable_error_log=True,
)
app_logger = get_logger("app")
init_conversation_logger(settings.log_dir)

# Google Sheets logging for cloud deployment
# Credentials are stored in Streamlit secrets (st.secrets["gsheets"])
if settings.gsheets_spreadsheet_id:
    try:
        if "gsheets" in st.secrets:
            init_gsheets_logger(settings.gsheets_spreadsheet_id, dict(st.secrets["gsheets"]))
            app_logger.info("Google Sheets logging initialized")
    except FileNotFoundError as e:
        app_logger.warning(f"Google Sheets logging not configured: {e}")

st.set_page_config(
    page_title="ShopBot - Shopping Assistant",
    page_icon="🛍️",
    layout="wide"
)


# =============================================================================
# COMPONENT INITIALIZATION
# =============================================================================

@st.cache_resource
def load_products(catalog_path: str):
    """Load the catalog (cached)."""
    try:
        products = load_catalog(catalog_path)
        return Catalog(products), get_catalog_statistics(products), None
    except FileNotFoundError:
        return Catalog([]), {}, f"File not found: {catalog_path}"
    except ValueError as e:
        return Catalog([]), {}, f"Error loading catalog: {e}"


@st.cache_resource
def get_components(_settings: Settings) -> OrchestratorComponents:
    """Build the dialogue components once per process."""
    return create_components(
        build_backends(_settings),
        relevance_threshold=_settings.relevance_threshold,
        max_suggestions=_settings.max_suggestions,
        context_turns=_settings.context_turns,
    )


# =============================================================================
# UI PIECES
# =============================================================================

formatter = get_response_formatter()


def add_to_cart(cart, product: Product) -> None:
    try:
        cart.add_item(product)
        st.toast(f"Added {product.name} to your cart")
    except CartError as e:
        st.warning(str(e))


def render_product(cart, product: Product, key_prefix: str) -> None:
    with st.container(border=True):
        if product.image:
            st.image(product.image, use_container_width=True)
        st.markdown(formatter.format_product_card(product))
        st.button(
            "Add to cart",
            key=f"{key_prefix}_{product.id}",
            disabled=not product.in_stock,
            on_click=add_to_cart,
            args=(cart, product),
        )


def render_cart_sidebar(cart) -> None:
    st.header("🛒 Cart")
    if not cart.items:
        st.write("Your cart is empty.")
        return

    for line in cart.items:
        product = line.product
        col1, col2 = st.columns([3, 2])
        with col1:
            st.write(f"**{product.name}**  \n${line.subtotal:,.2f}")
        with col2:
            quantity = st.number_input(
                "Qty",
                min_value=0,
                value=line.quantity,
                key=f"qty_{product.id}",
                label_visibility="collapsed",
            )
            if quantity != line.quantity:
                cart.update_quantity(product.id, int(quantity))
                st.rerun()

    st.markdown(f"**{cart.total_items} item(s) · ${cart.total_price:,.2f}**")
    if st.button("Clear cart"):
        cart.clear_cart()
        st.rerun()


def render_storefront(catalog: Catalog, cart) -> None:
    categories = ["All"] + catalog.categories()
    selected = st.radio("Category", categories, horizontal=True)
    products = catalog.by_category(selected)

    columns = st.columns(3)
    for i, product in enumerate(products):
        with columns[i % 3]:
            render_product(cart, product, key_prefix="shop")


def render_chat(orchestrator: DialogueOrchestrator, context, cart) -> None:
    for index, turn in enumerate(visible_turns(context)):
        with st.chat_message(chat_role(turn)):
            if turn.role == TurnRole.ERROR:
                st.error(turn.content)
            else:
                st.markdown(turn.content)
            if turn.show_suggestions:
                columns = st.columns(len(turn.suggestions))
                for column, product in zip(columns, turn.suggestions):
                    with column:
                        render_product(cart, product, key_prefix=f"turn{index}")

    query = None
    if context.query_count == 0:
        st.caption("Quick suggestions:")
        columns = st.columns(len(QUICK_SUGGESTIONS))
        for column, (label, suggestion) in zip(columns, QUICK_SUGGESTIONS):
            if column.button(label, key=f"quick_{label}"):
                query = suggestion

    typed = st.chat_input("Ask about products, or say \"add it\"...")
    query = typed or query

    if query:
        with st.spinner("Thinking..."):
            outcome = asyncio.run(orchestrator.process_turn(query, context))
        if settings.debug_mode and outcome.debug_lines:
            app_logger.debug("\n".join(outcome.debug_lines))
        st.rerun()


# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    st.title("🛍️ ShopBot")
    st.markdown("*Browse the store or ask the assistant*")

    catalog, stats, error = load_products(settings.catalog_path)

    if error:
        st.error(f"❌ {error}")
        st.stop()

    if not len(catalog):
        st.warning("⚠️ No products loaded. Check your catalog file.")
        st.stop()

    context, cart = get_session_objects(st.session_state, settings)
    orchestrator = DialogueOrchestrator(
        get_components(settings), catalog, cart, debug_mode=settings.debug_mode
    )

    with st.sidebar:
        render_cart_sidebar(cart)
        st.markdown("---")

        st.header("📦 Catalog")
        st.metric("Products", stats['total'])
        with st.expander("📊 Categories"):
            for category, count in stats['by_category'].items():
                st.write(f"• **{category}:** {count}")

        st.markdown("---")
        st.header("📊 Session")
        summary = session_summary(context, cart)
        st.write(f"**Session ID:** `{summary['session_id']}`")
        st.write(f"**Questions asked:** {summary['queries']}")
        if summary['interests']:
            st.write(f"**Interests:** {', '.join(summary['interests'])}")
        if summary['price_range']:
            st.write(f"**Price range:** {summary['price_range']}")
        if settings.debug_mode and summary['suggested']:
            st.write(f"**Last suggested:** {', '.join(summary['suggested'])}")

        if st.button("🔄 New Conversation"):
            reset_conversation(st.session_state, settings)
            st.rerun()

    shop_tab, chat_tab = st.tabs(["🏬 Shop", "💬 Assistant"])
    with shop_tab:
        render_storefront(catalog, cart)
    with chat_tab:
        render_chat(orchestrator, context, cart)


if __name__ == "__main__":
    main()
