"""Nav-menu editor screen router."""

import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from markupsafe import Markup

from ..picker import NAV_MENUS_SCREEN, NONCE_ACTION, NONCE_FIELD, Picker, Screen
from ..settings import SettingsStore
from ..stores import MenuStore
from ..templating import render_template
from ..utils import parse_nested_form

logger = logging.getLogger(__name__)

router = APIRouter(tags=["nav-menus"])


# Columns offered by the screen options toggle before the picker adds its own
BASE_COLUMNS = {
    "link-target": "Link Target",
    "css-classes": "CSS Classes",
    "xfn": "Link Relationship (XFN)",
    "description": "Description",
}


def _is_ajax(request: Request) -> bool:
    return request.headers.get("x-requested-with", "").lower() == "xmlhttprequest"


async def _resolve_menu(menus: MenuStore, menu_id: Optional[int]):
    if menu_id is not None:
        return await menus.get_menu(menu_id)
    all_menus = await menus.list_menus()
    return all_menus[0] if all_menus else None


@router.get("/nav-menus", response_class=HTMLResponse)
async def nav_menus_screen(request: Request, menu: Optional[int] = None):
    """Render the menu editor with the settings meta box and icon controls."""
    state = request.app.state
    settings_store: SettingsStore = state.settings_store
    picker: Picker = state.picker
    menus: MenuStore = state.menus

    await settings_store.load()
    current = await _resolve_menu(menus, menu)

    items = []
    if current is not None:
        for item in await menus.list_items(current.id):
            fields = Markup("")
            if picker.enabled:
                fields = await picker.render_fields(item, depth=0, menu_id=current.id)
            items.append((item, fields))

    assets = picker.assets() if picker.enabled else [settings_store.stylesheet()]
    html = render_template(
        "nav_menus.html",
        action=request.url.path,
        menus=await menus.list_menus(),
        menu=current,
        items=items,
        columns=picker.columns(BASE_COLUMNS) if picker.enabled else BASE_COLUMNS,
        meta_box=settings_store.render_meta_box(state.field_registry),
        nonce_field=NONCE_FIELD,
        nonce=state.nonces.create(NONCE_ACTION),
        styles=[asset for asset in assets if asset.kind == "style"],
        scripts=[asset for asset in assets if asset.kind == "script"],
        script_data=picker.script_data() if picker.enabled else None,
        media_templates=picker.media_templates() if picker.enabled else Markup(""),
    )
    return HTMLResponse(html)


@router.post("/nav-menus")
async def save_nav_menu(request: Request, menu: Optional[int] = None):
    """Save the settings meta box and every item's icon selection."""
    state = request.app.state
    settings_store: SettingsStore = state.settings_store
    picker: Picker = state.picker
    menus: MenuStore = state.menus

    form_data = await request.form()
    form = parse_nested_form(form_data.multi_items())
    nonce = form.get(NONCE_FIELD)

    await settings_store.load()

    section = form.get(settings_store.option_name)
    submitted_settings = section.get("settings") if isinstance(section, dict) else None
    if isinstance(submitted_settings, dict) and submitted_settings:
        if state.nonces.verify(nonce, NONCE_ACTION):
            await settings_store.update(submitted_settings)
        else:
            logger.warning("Ignoring settings submission: nonce check failed")

    current = await _resolve_menu(menus, menu)
    if current is not None and picker.enabled:
        screen = Screen(id=NAV_MENUS_SCREEN, is_ajax=_is_ajax(request))
        for item in await menus.list_items(current.id):
            await picker.save(current.id, item.id, form, screen, nonce)

    target = request.url.path
    if current is not None:
        target = f"{target}?menu={current.id}"
    return RedirectResponse(url=target, status_code=303)


@router.get("/nav-menus/picker.json")
async def picker_payload(request: Request):
    """Payload for the browser-side icon picker."""
    state = request.app.state
    await state.settings_store.load()
    return state.picker.script_data()
