"""Tests for the nav-menu editor endpoints."""

import pytest

from menu_icons.assets import Asset
from menu_icons.picker import NONCE_ACTION, NONCE_FIELD
from menu_icons.templating import render_template


@pytest.fixture
async def menu(app):
    """A menu with two items."""
    menus = app.state.menus
    nav_menu = await menus.create_menu("Primary")
    home = await menus.add_item(nav_menu.id, "Home", "/")
    about = await menus.add_item(nav_menu.id, "About", "/about")
    return nav_menu, home, about


@pytest.fixture
def app_nonce(app):
    return app.state.nonces.create(NONCE_ACTION)


def settings_form(nonce, icon_types=("fa", "svg"), extra_css="1", position="before"):
    return {
        NONCE_FIELD: nonce,
        "menu-icons[settings][icon_types][]": list(icon_types),
        "menu-icons[settings][extra_css]": extra_css,
        "menu-icons[settings][position]": position,
    }


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_screen_without_menus(client):
    response = await client.get("/nav-menus")

    assert response.status_code == 200
    assert "Menu Icons Settings" in response.text
    assert 'id="menu-to-edit"' not in response.text


@pytest.mark.asyncio
async def test_screen_renders_items_and_settings(client, menu):
    nav_menu, home, about = menu

    response = await client.get(f"/nav-menus?menu={nav_menu.id}")

    assert response.status_code == 200
    html = response.text
    assert f'name="{NONCE_FIELD}"' in html
    assert f'name="menu-icons[{home.id}][icon]"' in html
    assert f'name="menu-icons[{about.id}][position]"' in html
    assert 'name="menu-icons[settings][icon_types][]"' in html
    assert "var menuIconsPicker = " in html
    assert "js/picker.js?ver=" in html
    assert 'value="icon" checked="checked" /> Icon</label>' in html


@pytest.mark.asyncio
async def test_screen_without_icon_types_has_no_picker(client, app, menu):
    nav_menu, home, _ = menu
    await app.state.settings_store.update({"icon_types": []})

    response = await client.get(f"/nav-menus?menu={nav_menu.id}")

    assert f'name="menu-icons[{home.id}][icon]"' not in response.text
    assert "menuIconsPicker" not in response.text
    assert "Menu Icons Settings" in response.text


@pytest.mark.asyncio
async def test_save_settings_and_item_icons(client, app, menu, app_nonce):
    nav_menu, home, about = menu
    data = settings_form(app_nonce, position="after")
    data.update(
        {
            f"menu-icons[{home.id}][type]": "fa",
            f"menu-icons[{home.id}][icon]": "fa-home",
            f"menu-icons[{home.id}][position]": "after",
            f"menu-icons[{about.id}][type]": "",
            f"menu-icons[{about.id}][icon]": "",
        }
    )

    response = await client.post(f"/nav-menus?menu={nav_menu.id}", data=data)

    assert response.status_code == 303
    assert response.headers["location"] == f"/nav-menus?menu={nav_menu.id}"

    assert app.state.settings_store.get() == {
        "icon_types": ["fa", "svg"],
        "extra_css": True,
        "position": "after",
    }
    meta = app.state.item_meta
    assert await meta.get_meta(home.id, "menu-icons") == {
        "type": "fa",
        "icon": "fa-home",
        "position": "after",
    }
    assert await meta.get_meta(about.id, "menu-icons") is None


@pytest.mark.asyncio
async def test_save_with_bad_nonce_writes_nothing(client, app, menu):
    nav_menu, home, _ = menu
    data = settings_form("forged", position="after")
    data[f"menu-icons[{home.id}][type]"] = "fa"
    data[f"menu-icons[{home.id}][icon]"] = "fa-home"

    response = await client.post(f"/nav-menus?menu={nav_menu.id}", data=data)

    assert response.status_code == 303
    options = app.state.options
    assert await options.get_option("menu-icons") is None
    assert await app.state.item_meta.get_meta(home.id, "menu-icons") is None


@pytest.mark.asyncio
async def test_ajax_submission_skips_item_icons(client, app, menu, app_nonce):
    nav_menu, home, _ = menu
    await app.state.item_meta.update_meta(home.id, "menu-icons", {"type": "fa", "icon": "fa-star"})
    data = settings_form(app_nonce)
    data[f"menu-icons[{home.id}][icon]"] = ""

    await client.post(
        f"/nav-menus?menu={nav_menu.id}",
        data=data,
        headers={"X-Requested-With": "XMLHttpRequest"},
    )

    assert await app.state.item_meta.get_meta(home.id, "menu-icons") == {
        "type": "fa",
        "icon": "fa-star",
    }


@pytest.mark.asyncio
async def test_picker_payload(client):
    response = await client.get("/nav-menus/picker.json")

    assert response.status_code == 200
    data = response.json()
    assert data["activeTypes"] == [
        "dashicons",
        "elusive",
        "fa",
        "foundation-icons",
        "genericon",
        "image",
        "svg",
    ]
    assert data["settingsFields"][0]["id"] == "position"
    assert data["text"]["select"] == "Select"


def test_scripts_are_placed_by_footer_flag():
    html = str(
        render_template(
            "nav_menus.html",
            action="/nav-menus",
            menus=[],
            menu=None,
            items=[],
            columns={},
            meta_box="",
            nonce_field=NONCE_FIELD,
            nonce="token",
            styles=[],
            scripts=[
                Asset(handle="icon-picker", kind="script", src="/js/icon-picker.js"),
                Asset(handle="menu-icons-picker", kind="script", src="/js/picker.js", in_footer=True),
            ],
            script_data=None,
            media_templates="",
        )
    )

    head, body = html.split("</head>", 1)
    assert 'id="icon-picker-js"' in head
    assert 'id="menu-icons-picker-js"' not in head
    assert 'id="menu-icons-picker-js"' in body


@pytest.mark.asyncio
async def test_picker_script_loads_in_footer(client, menu):
    nav_menu, _, _ = menu

    response = await client.get(f"/nav-menus?menu={nav_menu.id}")

    html = response.text
    assert html.index("js/picker.js") > html.index('id="update-nav-menu"')
    assert html.index("js/picker.js") > html.index("var menuIconsPicker")
