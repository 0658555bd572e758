"""
Default UI primitives: lightweight stand-ins for the Fluent UI controls
form authors use, rendered as semantic HTML.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from ..runtime.functions import call_value
from ..runtime.values import UNDEFINED, is_nullish, strict_equals, to_string, truthy
from .elements import Element, create_element

PASSTHROUGH_PROPS = ("id", "className", "style", "title", "role", "tabIndex")


class Primitive:
    """Named host component: `Primitive(name, tag, default_props)`.

    Calling it with props yields an element of `tag` carrying
    `data-component` plus the presentational props. Controls with
    structure (labels, inputs, options) pass a custom `render`.
    """

    def __init__(
        self,
        name: str,
        tag: str = "div",
        default_props: Optional[Dict[str, Any]] = None,
        render: Optional[Callable[["Primitive", Dict[str, Any]], Any]] = None,
    ) -> None:
        self.name = name
        self.tag = tag
        self.default_props = dict(default_props or {})
        self._render = render
        self.properties: Dict[str, Any] = {}

    @property
    def display_name(self) -> str:
        return self.name

    def host_props(self, props: Dict[str, Any]) -> Dict[str, Any]:
        values = dict(self.default_props)
        values["data-component"] = self.name
        for key in PASSTHROUGH_PROPS:
            if key in props and props[key] is not UNDEFINED:
                values[key] = props[key]
        for key, value in props.items():
            if key.startswith(("data-", "aria-")) or (key.startswith("on") and key[2:3].isupper() and callable(value)):
                values[key] = value
        return values

    def __call__(self, props: Any = None) -> Any:
        props = props if isinstance(props, dict) else {}
        if self._render is not None:
            return self._render(self, props)
        return create_element(self.tag, self.host_props(props), *_children(props))

    def __repr__(self) -> str:
        return f"<primitive {self.name}>"


def _children(props: Dict[str, Any]) -> List[Any]:
    children = props.get("children", UNDEFINED)
    if children is UNDEFINED:
        return []
    return [children]


def _label(props: Dict[str, Any], key: str = "label") -> List[Any]:
    label = props.get(key, UNDEFINED)
    if is_nullish(label) or label == "":
        return []
    required = [create_element("span", {"className": "required"}, " *")] if truthy(props.get("required")) else []
    return [create_element("label", {"className": "ms-Label"}, to_string(label), *required)]


def _change_handler(props: Dict[str, Any]) -> Any:
    return props.get("onChange", UNDEFINED)


# ---------------------------------------------------------------------------
# Renderers for structured controls
# ---------------------------------------------------------------------------


def render_stack(primitive: Primitive, props: Dict[str, Any]) -> Element:
    values = primitive.host_props(props)
    style = dict(values.get("style") or {}) if isinstance(values.get("style"), dict) else {}
    style.setdefault("display", "flex")
    style.setdefault("flexDirection", "row" if truthy(props.get("horizontal")) else "column")
    tokens = props.get("tokens")
    if isinstance(tokens, dict) and "childrenGap" in tokens:
        style.setdefault("gap", tokens["childrenGap"])
    if truthy(props.get("wrap")):
        style.setdefault("flexWrap", "wrap")
    values["style"] = style
    return create_element(primitive.tag, values, *_children(props))


def render_text(primitive: Primitive, props: Dict[str, Any]) -> Element:
    values = primitive.host_props(props)
    if "variant" in props:
        values["data-variant"] = props["variant"]
    content = _children(props) or ([props["text"]] if "text" in props else [])
    return create_element(primitive.tag, values, *content)


def render_text_field(primitive: Primitive, props: Dict[str, Any]) -> Element:
    input_props: Dict[str, Any] = {"onChange": _change_handler(props)}
    for source, target in (
        ("value", "value"),
        ("defaultValue", "defaultValue"),
        ("placeholder", "placeholder"),
        ("readOnly", "readOnly"),
        ("disabled", "disabled"),
        ("type", "type"),
        ("name", "name"),
        ("maxLength", "maxLength"),
    ):
        if source in props and props[source] is not UNDEFINED:
            input_props[target] = props[source]
    if truthy(props.get("multiline")):
        rows = props.get("rows", 3)
        value = input_props.pop("value", UNDEFINED)
        field = create_element("textarea", {**input_props, "rows": rows}, *([] if is_nullish(value) else [to_string(value)]))
    else:
        input_props.setdefault("type", "text")
        field = create_element("input", input_props)
    extra = []
    if not is_nullish(props.get("errorMessage", UNDEFINED)) and props.get("errorMessage"):
        extra.append(create_element("div", {"className": "ms-TextField-errorMessage", "role": "alert"}, props["errorMessage"]))
    return create_element(primitive.tag, primitive.host_props(props), *_label(props), field, *extra)


def _options(props: Dict[str, Any]) -> List[Any]:
    options = props.get("options", [])
    return options if isinstance(options, list) else []


def render_dropdown(primitive: Primitive, props: Dict[str, Any]) -> Element:
    selected = props.get("selectedKey", props.get("defaultSelectedKey", UNDEFINED))
    selected_keys = props.get("selectedKeys", UNDEFINED)
    option_nodes = []
    if "placeholder" in props:
        option_nodes.append(create_element("option", {"value": ""}, to_string(props["placeholder"])))
    for option in _options(props):
        if not isinstance(option, dict):
            continue
        key = option.get("key", UNDEFINED)
        if isinstance(selected_keys, list):
            is_selected = any(strict_equals(key, item) for item in selected_keys)
        else:
            is_selected = strict_equals(key, selected)
        option_nodes.append(
            create_element(
                "option",
                {"value": to_string(key), "selected": is_selected, "disabled": truthy(option.get("disabled"))},
                to_string(option.get("text", key)),
            )
        )
    select = create_element(
        "select",
        {"onChange": _change_handler(props), "disabled": truthy(props.get("disabled")), "multiple": truthy(props.get("multiSelect"))},
        *option_nodes,
    )
    return create_element(primitive.tag, primitive.host_props(props), *_label(props), select)


def render_date_picker(primitive: Primitive, props: Dict[str, Any]) -> Element:
    value = props.get("value", UNDEFINED)
    text = ""
    if not is_nullish(value):
        formatter = props.get("formatDate", UNDEFINED)
        text = to_string(call_value(formatter, [value])) if callable(formatter) else to_string(value)
    field = create_element(
        "input",
        {
            "type": "text",
            "value": text,
            "placeholder": props.get("placeholder", UNDEFINED),
            "readOnly": True,
            "disabled": truthy(props.get("disabled")),
            "onSelectDate": props.get("onSelectDate", UNDEFINED),
        },
    )
    return create_element(primitive.tag, primitive.host_props(props), *_label(props), field)


def render_button(primitive: Primitive, props: Dict[str, Any]) -> Element:
    values = primitive.host_props(props)
    values["type"] = "button"
    values["disabled"] = truthy(props.get("disabled"))
    content = _children(props) or ([props["text"]] if "text" in props else [])
    icon = props.get("iconProps", UNDEFINED)
    if isinstance(icon, dict) and "iconName" in icon:
        content = [create_element("i", {"data-icon-name": icon["iconName"]})] + content
    return create_element(primitive.tag, values, *content)


def render_spin_button(primitive: Primitive, props: Dict[str, Any]) -> Element:
    field = create_element(
        "input",
        {
            "type": "number",
            "value": props.get("value", props.get("defaultValue", UNDEFINED)),
            "min": props.get("min", UNDEFINED),
            "max": props.get("max", UNDEFINED),
            "step": props.get("step", UNDEFINED),
            "disabled": truthy(props.get("disabled")),
            "onChange": _change_handler(props),
        },
    )
    return create_element(primitive.tag, primitive.host_props(props), *_label(props), field)


def render_checkbox(primitive: Primitive, props: Dict[str, Any]) -> Element:
    checked = props.get("checked", props.get("defaultChecked", False))
    input_props = {
        "type": "checkbox",
        "checked": truthy(checked),
        "disabled": truthy(props.get("disabled")),
        "onChange": _change_handler(props),
    }
    if primitive.name == "Toggle":
        input_props["role"] = "switch"
    text = props.get("label", UNDEFINED)
    content: List[Any] = [create_element("input", input_props)]
    if not is_nullish(text):
        content.append(create_element("span", None, to_string(text)))
    if primitive.name == "Toggle":
        state_text = props.get("onText" if truthy(checked) else "offText", UNDEFINED)
        if not is_nullish(state_text):
            content.append(create_element("span", {"className": "ms-Toggle-stateText"}, to_string(state_text)))
    return create_element(primitive.tag, primitive.host_props(props), *content)


def render_choice_group(primitive: Primitive, props: Dict[str, Any]) -> Element:
    selected = props.get("selectedKey", props.get("defaultSelectedKey", UNDEFINED))
    name = to_string(props.get("name", props.get("label", "choice")))
    choices = []
    for option in _options(props):
        if not isinstance(option, dict):
            continue
        key = option.get("key", UNDEFINED)
        radio = create_element(
            "input",
            {
                "type": "radio",
                "name": name,
                "value": to_string(key),
                "checked": strict_equals(key, selected),
                "disabled": truthy(option.get("disabled")) or truthy(props.get("disabled")),
                "onChange": _change_handler(props),
            },
        )
        choices.append(create_element("label", {"className": "ms-ChoiceField"}, radio, to_string(option.get("text", key))))
    legend = []
    if not is_nullish(props.get("label", UNDEFINED)):
        legend = [create_element("legend", None, to_string(props["label"]))]
    return create_element(primitive.tag, primitive.host_props(props), *legend, *choices)


def render_combo_box(primitive: Primitive, props: Dict[str, Any]) -> Element:
    selected = props.get("selectedKey", UNDEFINED)
    text = props.get("text", UNDEFINED)
    if is_nullish(text):
        match = next(
            (opt for opt in _options(props) if isinstance(opt, dict) and strict_equals(opt.get("key", UNDEFINED), selected)),
            None,
        )
        text = match.get("text", "") if match else ""
    field = create_element(
        "input",
        {"type": "text", "value": to_string(text), "placeholder": props.get("placeholder", UNDEFINED), "onChange": _change_handler(props)},
    )
    return create_element(primitive.tag, primitive.host_props(props), *_label(props), field)


def render_persona(primitive: Primitive, props: Dict[str, Any]) -> Element:
    parts = [create_element("span", {"className": "ms-Persona-primaryText"}, to_string(props.get("text", "")))]
    secondary = props.get("secondaryText", UNDEFINED)
    if not is_nullish(secondary):
        parts.append(create_element("span", {"className": "ms-Persona-secondaryText"}, to_string(secondary)))
    return create_element(primitive.tag, primitive.host_props(props), *parts)


def render_icon(primitive: Primitive, props: Dict[str, Any]) -> Element:
    values = primitive.host_props(props)
    values["data-icon-name"] = props.get("iconName", UNDEFINED)
    return create_element(primitive.tag, values)


def render_message_bar(primitive: Primitive, props: Dict[str, Any]) -> Element:
    values = primitive.host_props(props)
    values["role"] = "status"
    kind = props.get("messageBarType", MESSAGE_BAR_TYPE["info"])
    values["data-type"] = next((name for name, value in MESSAGE_BAR_TYPE.items() if value == kind), "info")
    return create_element(primitive.tag, values, *_children(props))


def render_link(primitive: Primitive, props: Dict[str, Any]) -> Element:
    values = primitive.host_props(props)
    for key in ("href", "target", "rel"):
        if key in props:
            values[key] = props[key]
    return create_element(primitive.tag, values, *_children(props))


def render_overlay(primitive: Primitive, props: Dict[str, Any]) -> Any:
    if primitive.name == "Dialog":
        if truthy(props.get("hidden", True)):
            return None
    elif not truthy(props.get("isOpen")):
        return None
    heading = props.get("headerText", UNDEFINED)
    content = props.get("dialogContentProps", UNDEFINED)
    if isinstance(content, dict):
        heading = content.get("title", heading)
    header = [] if is_nullish(heading) else [create_element("h2", None, to_string(heading))]
    values = primitive.host_props(props)
    values["role"] = "dialog"
    return create_element(primitive.tag, values, *header, *_children(props))


def render_pivot_item(primitive: Primitive, props: Dict[str, Any]) -> Element:
    values = primitive.host_props(props)
    values["data-header"] = props.get("headerText", UNDEFINED)
    return create_element(primitive.tag, values, *_children(props))


def render_image(primitive: Primitive, props: Dict[str, Any]) -> Element:
    values = primitive.host_props(props)
    for key in ("src", "alt", "width", "height"):
        if key in props:
            values[key] = props[key]
    return create_element(primitive.tag, values)


def render_spinner(primitive: Primitive, props: Dict[str, Any]) -> Element:
    values = primitive.host_props(props)
    values["role"] = "progressbar"
    label = props.get("label", UNDEFINED)
    return create_element(primitive.tag, values, *([] if is_nullish(label) else [to_string(label)]))


def render_search_box(primitive: Primitive, props: Dict[str, Any]) -> Element:
    values = primitive.host_props(props)
    values.update(
        {
            "type": "search",
            "value": props.get("value", UNDEFINED),
            "placeholder": props.get("placeholder", UNDEFINED),
            "onChange": _change_handler(props),
        }
    )
    return create_element(primitive.tag, values)


def render_progress(primitive: Primitive, props: Dict[str, Any]) -> Element:
    values = primitive.host_props(props)
    values["role"] = "progressbar"
    values["aria-valuenow"] = props.get("percentComplete", UNDEFINED)
    label = props.get("label", UNDEFINED)
    return create_element(primitive.tag, values, *([] if is_nullish(label) else [to_string(label)]))


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

PERSONA_SIZE = {
    "size8": 17,
    "size24": 10,
    "size32": 11,
    "size40": 12,
    "size48": 13,
    "size56": 16,
    "size72": 14,
    "size100": 15,
    "size120": 18,
}

MESSAGE_BAR_TYPE = {"info": 0, "error": 1, "blocked": 2, "severeWarning": 3, "success": 4, "warning": 5}

DROPDOWN_MENU_ITEM_TYPE = {"Normal": 0, "Divider": 1, "Header": 2, "SelectAll": 3}

SPINNER_SIZE = {"xSmall": 0, "small": 1, "medium": 2, "large": 3}

PANEL_TYPE = {"smallFluid": 0, "smallFixedFar": 1, "smallFixedNear": 2, "medium": 3, "large": 4, "largeFixed": 5, "extraLarge": 6, "custom": 7, "customNear": 8}

DIALOG_TYPE = {"normal": 0, "largeHeader": 1, "close": 2}


def build_primitives() -> Dict[str, Any]:
    """Fresh primitives table, aliases included."""
    table: Dict[str, Any] = {
        "Stack": Primitive("Stack", "div", {"className": "ms-Stack"}, render_stack),
        "StackItem": Primitive("StackItem", "div", {"className": "ms-StackItem"}),
        "Text": Primitive("Text", "span", {"className": "ms-Text"}, render_text),
        "TextField": Primitive("TextField", "div", {"className": "ms-TextField"}, render_text_field),
        "Dropdown": Primitive("Dropdown", "div", {"className": "ms-Dropdown"}, render_dropdown),
        "DatePicker": Primitive("DatePicker", "div", {"className": "ms-DatePicker"}, render_date_picker),
        "PrimaryButton": Primitive("PrimaryButton", "button", {"className": "ms-Button ms-Button--primary"}, render_button),
        "DefaultButton": Primitive("DefaultButton", "button", {"className": "ms-Button"}, render_button),
        "ActionButton": Primitive("ActionButton", "button", {"className": "ms-Button ms-Button--action"}, render_button),
        "IconButton": Primitive("IconButton", "button", {"className": "ms-Button ms-Button--icon"}, render_button),
        "SpinButton": Primitive("SpinButton", "div", {"className": "ms-SpinButton"}, render_spin_button),
        "Checkbox": Primitive("Checkbox", "label", {"className": "ms-Checkbox"}, render_checkbox),
        "Toggle": Primitive("Toggle", "label", {"className": "ms-Toggle"}, render_checkbox),
        "ChoiceGroup": Primitive("ChoiceGroup", "fieldset", {"className": "ms-ChoiceFieldGroup"}, render_choice_group),
        "ComboBox": Primitive("ComboBox", "div", {"className": "ms-ComboBox"}, render_combo_box),
        "Label": Primitive("Label", "label", {"className": "ms-Label"}),
        "Separator": Primitive("Separator", "div", {"className": "ms-Separator", "role": "separator"}),
        "Persona": Primitive("Persona", "div", {"className": "ms-Persona"}, render_persona),
        "Icon": Primitive("Icon", "i", {"className": "ms-Icon"}, render_icon),
        "MessageBar": Primitive("MessageBar", "div", {"className": "ms-MessageBar"}, render_message_bar),
        "Link": Primitive("Link", "a", {"className": "ms-Link"}, render_link),
        "Panel": Primitive("Panel", "aside", {"className": "ms-Panel"}, render_overlay),
        "Dialog": Primitive("Dialog", "div", {"className": "ms-Dialog"}, render_overlay),
        "DialogFooter": Primitive("DialogFooter", "div", {"className": "ms-Dialog-actions"}),
        "Modal": Primitive("Modal", "div", {"className": "ms-Modal"}, render_overlay),
        "Pivot": Primitive("Pivot", "div", {"className": "ms-Pivot", "role": "tablist"}),
        "PivotItem": Primitive("PivotItem", "div", {"className": "ms-PivotItem", "role": "tabpanel"}, render_pivot_item),
        "SearchBox": Primitive("SearchBox", "input", {"className": "ms-SearchBox"}, render_search_box),
        "ProgressIndicator": Primitive("ProgressIndicator", "div", {"className": "ms-ProgressIndicator"}, render_progress),
        "Spinner": Primitive("Spinner", "div", {"className": "ms-Spinner"}, render_spinner),
        "Image": Primitive("Image", "img", {"className": "ms-Image"}, render_image),
        "ControlGrid": Primitive("ControlGrid", "div", {"className": "fe-grid", "style": {"display": "grid"}}),
        "ControlRow": Primitive("ControlRow", "div", {"className": "fe-row", "style": {"display": "flex"}}),
        "PersonaSize": dict(PERSONA_SIZE),
        "MessageBarType": dict(MESSAGE_BAR_TYPE),
        "DropdownMenuItemType": dict(DROPDOWN_MENU_ITEM_TYPE),
        "SpinnerSize": dict(SPINNER_SIZE),
        "PanelType": dict(PANEL_TYPE),
        "DialogType": dict(DIALOG_TYPE),
    }
    table["Stack"].properties["Item"] = table["StackItem"]
    for alias, target in PRIMITIVE_ALIASES.items():
        table[alias] = table[target]
    return table


PRIMITIVE_ALIASES = {"Divider": "Separator", "Grid": "ControlGrid", "Row": "ControlRow"}

# Namespace aliases under which form code may reach the same table.
FLUENT_NAMESPACES = ("Fluent", "Fabric", "FluentUI")
