"""
Domain environment for MOIS forms.

`MoisScopeBuilder` seeds a `ScopeBuilder` with the primitives table, the
Fluent namespace aliases, date helpers, form-action stubs, browser
stand-ins, the `Mois*` helper namespaces and form-state hooks bound to one
`FormStateStore`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..runtime.functions import NativeFunction, call_value
from ..runtime.stdlib import JSDate, json_stringify
from ..runtime.values import UNDEFINED, is_nullish, to_string, truthy
from ..state import FormStateStore
from ..ui import hooks
from ..ui.elements import create_context, create_element
from ..ui.primitives import FLUENT_NAMESPACES, Primitive, build_primitives
from .builder import ScopeBuilder, ScopeConfig

logger = logging.getLogger(__name__)

DEFAULT_IDENTITY: Dict[str, Any] = {
    "title": "Form Preview",
    "name": "FormPreview",
    "description": "",
    "version": {"major": 1, "minor": 0, "patch": 0},
    "type": "form",
    "owner": "Preview",
    "author": "Preview",
    "publisher": "Preview",
    "requiredFormViewerVersion": {"major": 0, "minor": 1, "patch": 0},
    "requiredMoisVersion": {"major": 2, "minor": 26, "patch": 18},
}

DEFAULT_SECTION: Dict[str, Any] = {
    "sectionNum": 0,
    "layout": "linear",
    "fieldPlacement": "top",
    "readOnlyOptions": {},
    "activeSelector": UNDEFINED,
    "statusSelector": UNDEFINED,
    "sourceSelector": UNDEFINED,
    "sectionComplete": False,
    "focusZoneRoot": UNDEFINED,
}

DEFAULT_ACTIVITY_OPTIONS: Dict[str, str] = {
    "orientation": "landscape",
    "navSize": "200px",
    "detailSize": "300px",
    "nameBlockSize": "auto",
}

THEME: Dict[str, Any] = {
    "palette": {
        "themePrimary": "#0078d4",
        "themeDark": "#005a9e",
        "neutralPrimary": "#323130",
        "neutralLight": "#edebe9",
        "white": "#ffffff",
    },
    "semanticColors": {"bodyBackground": "#ffffff", "bodyText": "#323130", "errorText": "#a4262c"},
    "spacing": {"s1": "4px", "m": "16px", "l1": "20px"},
    "mois": {
        "buttonSizes": {
            "tiny": {"minWidth": 40, "height": 24},
            "small": {"minWidth": 80, "height": 32},
            "medium": {"minWidth": 120, "height": 32},
            "large": {"minWidth": 160, "height": 40},
        }
    },
}

SELECTABLE_OPTION_MENU_ITEM_TYPE = {"Normal": 0, "Divider": 1, "Header": 2}

FALLBACK_CODE_LIST: List[Dict[str, str]] = [
    {"code": "Y", "display": "Yes"},
    {"code": "N", "display": "No"},
]


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------


def get_date_string(date: Any = UNDEFINED) -> str:
    if not truthy(date):
        return ""
    return JSDate(date).iso().split("T")[0]


def get_time_string(date: Any = UNDEFINED) -> str:
    if not truthy(date):
        return ""
    return JSDate(date).local().strftime("%H:%M")


def get_date_time_string(date: Any = UNDEFINED) -> str:
    if not truthy(date):
        return ""
    return JSDate(date).iso()


def get_age(birth_date: Any = UNDEFINED) -> str:
    if not truthy(birth_date):
        return ""
    birth = JSDate(birth_date).local()
    today = datetime.now()
    years = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        years -= 1
    return f"{years} years"


def date_helpers() -> Dict[str, Any]:
    return {
        "getDateString": NativeFunction("getDateString", get_date_string),
        "getTimeString": NativeFunction("getTimeString", get_time_string),
        "getDateTimeString": NativeFunction("getDateTimeString", get_date_time_string),
        "getAge": NativeFunction("getAge", get_age),
    }


def _logged_action(name: str, message: str) -> NativeFunction:
    def action(*_: Any) -> Any:
        logger.info(message)
        return UNDEFINED

    return NativeFunction(name, action)


def form_actions() -> Dict[str, Any]:
    return {
        "saveDraft": _logged_action("saveDraft", "Save draft"),
        "closeForm": _logged_action("closeForm", "Close form"),
        "saveSubmit": _logged_action("saveSubmit", "Save and submit"),
        "refresh": _logged_action("refresh", "Refresh"),
    }


def _alert(message: Any = UNDEFINED) -> Any:
    logger.info("Alert: %s", to_string(message))
    return UNDEFINED


def _confirm(message: Any = UNDEFINED) -> bool:
    logger.info("Confirm: %s", to_string(message))
    return True


def _prompt(message: Any = UNDEFINED, default: Any = UNDEFINED) -> str:
    logger.info("Prompt: %s", to_string(message))
    return "user input"


def browser_stubs() -> Dict[str, Any]:
    return {
        "alert": NativeFunction("alert", _alert),
        "confirm": NativeFunction("confirm", _confirm),
        "prompt": NativeFunction("prompt", _prompt),
    }


def _notify(options: Any = UNDEFINED) -> Any:
    if isinstance(options, str):
        message = options
    elif isinstance(options, dict) and not is_nullish(options.get("message", UNDEFINED)):
        message = to_string(options["message"])
    else:
        message = "Notification"
    logger.info("Notification: %s (%s)", message, json_stringify(options))
    return UNDEFINED


def mois_functions() -> Dict[str, Any]:
    table = {"notify": NativeFunction("notify", _notify)}
    for name in ("save", "close", "print", "sign", "refresh"):
        table[name] = _logged_action(name, f"{name.capitalize()} called")
    return table


# ---------------------------------------------------------------------------
# Controls
# ---------------------------------------------------------------------------


def _action_button(name: str, label: str, base: Primitive, action: Any) -> NativeFunction:
    def render(props: Any = None) -> Any:
        values = dict(props) if isinstance(props, dict) else {}
        values.setdefault("text", label)
        values.setdefault("onClick", action)
        return base({**values, "data-action": name})

    return NativeFunction(name, render)


def _titled(primitive: Primitive, props: Dict[str, Any]) -> Any:
    title = props.get("title", UNDEFINED)
    heading = [] if is_nullish(title) else [create_element("h3", {"className": "mois-title"}, to_string(title))]
    children = props.get("children", UNDEFINED)
    values = primitive.host_props(props)
    values.pop("title", None)
    return create_element(primitive.tag, values, *heading, *([] if children is UNDEFINED else [children]))


def mois_controls(primitives: Mapping[str, Any], section_context: Any) -> Dict[str, Any]:
    """Form-level controls, built from the primitives table."""
    actions = mois_functions()
    default_button = primitives["DefaultButton"]
    primary_button = primitives["PrimaryButton"]
    section_primitive = Primitive("Section", "section", {"className": "mois-Section"})

    def section(props: Any = None) -> Any:
        props = props if isinstance(props, dict) else {}
        value = {key: props.get(key, default) for key, default in DEFAULT_SECTION.items()}
        body = _titled(section_primitive, props)
        return create_element(section_context.Provider, {"value": value}, body)

    def text_area(props: Any = None) -> Any:
        values = dict(props) if isinstance(props, dict) else {}
        values["multiline"] = True
        return primitives["TextField"](values)

    return {
        "Form": Primitive("Form", "form", {"className": "mois-Form"}, _titled),
        "Page": Primitive("Page", "div", {"className": "mois-Page"}, _titled),
        "Section": NativeFunction("Section", section),
        "Header": Primitive("Header", "header", {"className": "mois-Header"}, _titled),
        "Footer": Primitive("Footer", "footer", {"className": "mois-Footer"}),
        "Title": Primitive("Title", "h2", {"className": "mois-Title"}),
        "TextArea": NativeFunction("TextArea", text_area),
        "SimpleText": primitives["TextField"],
        "TextField": primitives["TextField"],
        "Dropdown": primitives["Dropdown"],
        "ComboBox": primitives["ComboBox"],
        "Checkbox": primitives["Checkbox"],
        "Radio": primitives["ChoiceGroup"],
        "DatePicker": primitives["DatePicker"],
        "Toggle": primitives["Toggle"],
        "Button": default_button,
        "SubmitButton": _action_button("SubmitButton", "Submit", primary_button, actions["save"]),
        "SaveButton": _action_button("SaveButton", "Save", default_button, actions["save"]),
        "PrintButton": _action_button("PrintButton", "Print", default_button, actions["print"]),
        "SignButton": _action_button("SignButton", "Sign", default_button, actions["sign"]),
        "RefreshButton": _action_button("RefreshButton", "Refresh", default_button, actions["refresh"]),
        "CloseButton": _action_button("CloseButton", "Close", default_button, actions["close"]),
    }


class MoisScopeBuilder(ScopeBuilder):
    """Environment builder preloaded with the MOIS form runtime."""

    def __init__(
        self,
        store: Optional[FormStateStore] = None,
        identity: Optional[Dict[str, Any]] = None,
        config: Optional[ScopeConfig] = None,
    ) -> None:
        super().__init__(config)
        self.store = store if store is not None else FormStateStore()
        self.identity = identity
        self.section_context = create_context(dict(DEFAULT_SECTION))
        primitives = build_primitives()
        controls = mois_controls(primitives, self.section_context)
        form_hooks = self.form_hooks()
        self.with_primitives({**primitives, **{namespace: primitives for namespace in FLUENT_NAMESPACES}})
        self.with_hooks(form_hooks)
        self.with_namespaces(
            {
                "MoisFunction": mois_functions(),
                "MoisHooks": {
                    name: form_hooks[name]
                    for name in ("useActivityOptions", "useSourceData", "useActiveData", "useCodeList", "useSection", "useTheme")
                },
                "MoisControl": controls,
            }
        )
        self.with_components({name: controls[name] for name in ("Form", "Page", "Section", "Header", "Footer", "Title", "TextArea")})
        self.with_utilities({**date_helpers(), **form_actions(), **browser_stubs()})
        self.with_globals({"SelectableOptionMenuItemType": dict(SELECTABLE_OPTION_MENU_ITEM_TYPE)})

    # ------------------------------------------------------------------
    # Form-state hooks
    # ------------------------------------------------------------------

    def use_code_list(self, system: Any = UNDEFINED) -> Any:
        option_lists = self.store.source_data.get("optionLists") or {}
        key = to_string(system)
        if key in option_lists:
            return option_lists[key]
        return FALLBACK_CODE_LIST

    def use_section(self, overrides: Any = UNDEFINED) -> Dict[str, Any]:
        context = hooks.use_context(self.section_context)
        section = dict(context) if isinstance(context, dict) else dict(DEFAULT_SECTION)
        if isinstance(overrides, dict):
            section.update({key: value for key, value in overrides.items() if not is_nullish(value)})
        return section

    def use_theme(self) -> Dict[str, Any]:
        return THEME

    def use_activity_options(self, initial: Any = UNDEFINED) -> Any:
        initial = initial if isinstance(initial, dict) else {}
        options = {key: initial.get(key) if truthy(initial.get(key)) else default for key, default in DEFAULT_ACTIVITY_OPTIONS.items()}
        value, _ = hooks.use_state(options)
        return value

    def use_form_state(self) -> List[Any]:
        return self.store.use_active_data()

    def use_field_value(self, name: Any = UNDEFINED, default: Any = UNDEFINED) -> List[Any]:
        key = to_string(name)
        data, _ = self.store.use_active_data()
        field_data = (data.get("field") or {}).get("data") or {}
        value = field_data.get(key, default)

        def set_value(update: Any = UNDEFINED) -> Any:
            def recipe(draft: Dict[str, Any]) -> Any:
                target = draft.setdefault("field", {}).setdefault("data", {})
                target[key] = call_value(update, [target.get(key, default)]) if callable(update) else update
                return UNDEFINED

            return self.store.set_form_data(recipe)

        return [value, NativeFunction("setFieldValue", set_value)]

    def use_effect_once(self, effect: Any = UNDEFINED) -> Any:
        return hooks.use_effect(effect, [])

    def form_hooks(self) -> Dict[str, Any]:
        bindings = dict(self.store.bindings())
        bindings.update(
            {
                "useCodeList": NativeFunction("useCodeList", self.use_code_list),
                "useOptionLists": NativeFunction("useOptionLists", lambda: self.store.source_data.get("optionLists") or {}),
                "useSection": NativeFunction("useSection", self.use_section),
                "useTheme": NativeFunction("useTheme", self.use_theme),
                "useActivityOptions": NativeFunction("useActivityOptions", self.use_activity_options),
                "useFormState": NativeFunction("useFormState", self.use_form_state),
                "useFieldValue": NativeFunction("useFieldValue", self.use_field_value),
                "useEffectOnce": NativeFunction("useEffectOnce", self.use_effect_once),
            }
        )
        return bindings

    # ------------------------------------------------------------------
    # Registry injection
    # ------------------------------------------------------------------

    def with_group_components(self, registry: Any) -> "MoisScopeBuilder":
        """Inject every export of a loaded Registry as a component."""
        components = getattr(registry, "components", registry)
        self.with_components(dict(components or {}))
        return self

    def build_scope(self) -> Dict[str, Any]:
        scope = super().build_scope()
        scope["Identity"] = dict(self.identity) if self.identity is not None else dict(DEFAULT_IDENTITY)
        return scope
