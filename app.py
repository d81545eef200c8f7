import logging
import os
from functools import partial

import gradio as gr

from json_smart_parser.handlers import (
    clear_history_handler,
    clear_metrics_handler,
    diff_handler,
    export_table_handler,
    extract_preview_handler,
    generate_ts_handler,
    history_choices_handler,
    load_file_handler,
    load_history_item_handler,
    load_settings_handler,
    mask_handler,
    mask_rule_choices,
    metrics_handler,
    parse_input_handler,
    path_lookup_handler,
    remove_history_item_handler,
    save_settings_handler,
    search_handler,
    stats_handler,
)
from json_smart_parser.history import HistoryStore
from json_smart_parser.monitor import PerformanceMonitor
from json_smart_parser.settings import SettingsStore
from json_smart_parser.storage import JsonFileBackend

HISTORY_FILE = os.environ.get("JSON_SMART_PARSER_HISTORY", os.path.join(os.path.expanduser("~"), ".json_smart_parser_history.json"))
SETTINGS_FILE = os.environ.get("JSON_SMART_PARSER_SETTINGS", os.path.join(os.path.expanduser("~"), ".json_smart_parser_settings.json"))

history_store = HistoryStore(JsonFileBackend(HISTORY_FILE))
settings_store = SettingsStore(JsonFileBackend(SETTINGS_FILE))
monitor = PerformanceMonitor()

# --- UI Definition ---
with gr.Blocks(title="JSON Smart Parser") as demo:
    gr.Markdown("# JSON Smart Parser")
    gr.Markdown("Paste JSON, URL-encoded or Base64 text, a JWT, a URL with query parameters, or log lines containing JSON.")

    # State
    parsed_data_state = gr.State()

    with gr.Tab("Parse"):
        with gr.Row():
            # Left Panel: Input
            with gr.Column(scale=1):
                gr.Markdown("### 1. Input")
                raw_input = gr.Textbox(label="Raw Text", lines=14, placeholder='{"a": 1} or %7B%22a%22%3A1%7D or eyJ...')
                file_input = gr.File(label="Or upload a text file")
                with gr.Row():
                    auto_decode = gr.Checkbox(label="Auto decode (URL / JWT / Base64)", value=True)
                    sort_keys = gr.Checkbox(label="Sort keys", value=False)
                    parse_nested = gr.Checkbox(label="Parse nested JSON strings", value=False)
                save_settings_btn = gr.Button("Save as defaults")
                parse_btn = gr.Button("Parse", variant="primary")
                status_msg = gr.Textbox(label="Status", interactive=False)

                gr.Markdown("### History")
                history_selector = gr.Dropdown(label="Recent inputs", choices=[], interactive=True)
                with gr.Row():
                    refresh_history_btn = gr.Button("Refresh")
                    remove_history_btn = gr.Button("Remove")
                    clear_history_btn = gr.Button("Clear")

                with gr.Accordion("Performance", open=False):
                    metrics_report = gr.Markdown()
                    clear_metrics_btn = gr.Button("Clear records")

            # Right Panel: Result
            with gr.Column(scale=1):
                gr.Markdown("### 2. Result")
                pretty_output = gr.Code(label="Parsed JSON", language="json")

    with gr.Tab("Search & Paths"):
        with gr.Row():
            with gr.Column(scale=1):
                search_term = gr.Textbox(label="Search keys and values")
                search_btn = gr.Button("Search")
                search_status = gr.Textbox(label="Search Status", interactive=False)
                search_results = gr.Dropdown(label="Matching paths", choices=[], interactive=True, allow_custom_value=True)
            with gr.Column(scale=1):
                path_input = gr.Textbox(label="Path", placeholder='$["key"][0] or /key/0')
                lookup_btn = gr.Button("Get value")
                dot_path_output = gr.Textbox(label="Dot path", interactive=False)
                lookup_status = gr.Textbox(label="Lookup Status", interactive=False)
                value_output = gr.JSON(label="Value at path")

    with gr.Tab("TypeScript"):
        with gr.Row():
            with gr.Column(scale=1):
                ts_root_name = gr.Textbox(label="Root type name", value="Root")
                ts_sample = gr.Number(label="Array sample size", value=100, precision=0)
                ts_enum_strings = gr.Checkbox(label="Infer string enums", value=True)
                ts_enum_max = gr.Number(label="Max enum values", value=8, precision=0)
                ts_enum_max_len = gr.Number(label="Max enum value length", value=32, precision=0)
                ts_enum_numbers = gr.Checkbox(label="Infer number enums", value=True)
                ts_enum_num_max = gr.Number(label="Max number enum values", value=8, precision=0)
                ts_detect_date = gr.Checkbox(label="Detect ISO dates", value=False)
                ts_btn = gr.Button("Generate", variant="primary")
            with gr.Column(scale=2):
                ts_output = gr.Code(label="TypeScript", language="typescript")

    with gr.Tab("Extract"):
        with gr.Row():
            with gr.Column(scale=1):
                extract_paths = gr.Textbox(label="Paths (one per line)", lines=6, placeholder='$["items"][0]["id"]')
                extract_expand = gr.Checkbox(label="Expand arrays into rows", value=False)
                extract_joiner = gr.Textbox(label="Array joiner", value=",")
                extract_placeholder = gr.Textbox(label="Empty value placeholder", value="")
                extract_preview_btn = gr.Button("Load Preview")
            with gr.Column(scale=1):
                output_format = gr.Radio(choices=["CSV", "JSON"], value="CSV", label="Output Format")
                output_filename = gr.Textbox(label="Output Filename (optional)", placeholder="extract")
                export_btn = gr.Button("Export Data", variant="primary")
                download_output = gr.File(label="Download Result")
                extract_status = gr.Textbox(label="Extract Status", interactive=False)
                extract_preview = gr.JSON(label="Preview (first 3 rows)")

    with gr.Tab("Diff"):
        with gr.Row():
            diff_left = gr.Textbox(label="Old", lines=12)
            diff_right = gr.Textbox(label="New", lines=12)
        diff_btn = gr.Button("Compare", variant="primary")
        diff_report = gr.Markdown()

    with gr.Tab("Stats & Masking"):
        with gr.Row():
            with gr.Column(scale=1):
                stats_btn = gr.Button("Analyze", variant="primary")
                stats_report = gr.Markdown()
            with gr.Column(scale=1):
                mask_rules = gr.CheckboxGroup(
                    label="Masking rules",
                    choices=mask_rule_choices(),
                    value=[rule_id for _, rule_id in mask_rule_choices()],
                )
                mask_btn = gr.Button("Mask")
                mask_log = gr.Textbox(label="Masked fields", lines=6, interactive=False)
                masked_output = gr.JSON(label="Masked data")

    file_input.upload(fn=load_file_handler, inputs=[file_input], outputs=[raw_input, status_msg])

    parse_btn.click(
        fn=partial(parse_input_handler, history=history_store, monitor=monitor),
        inputs=[raw_input, auto_decode, sort_keys, parse_nested],
        outputs=[parsed_data_state, pretty_output, status_msg],
    ).then(
        fn=partial(history_choices_handler, history=history_store),
        inputs=None,
        outputs=[history_selector],
    ).then(
        fn=partial(metrics_handler, monitor=monitor),
        inputs=None,
        outputs=[metrics_report],
    )

    history_selector.input(
        fn=partial(load_history_item_handler, history=history_store),
        inputs=[history_selector],
        outputs=[raw_input],
    )
    refresh_history_btn.click(fn=partial(history_choices_handler, history=history_store), inputs=None, outputs=[history_selector])
    remove_history_btn.click(
        fn=partial(remove_history_item_handler, history=history_store),
        inputs=[history_selector],
        outputs=[history_selector],
    )
    clear_history_btn.click(fn=partial(clear_history_handler, history=history_store), inputs=None, outputs=[history_selector])

    search_btn.click(
        fn=search_handler,
        inputs=[parsed_data_state, search_term],
        outputs=[search_results, search_status],
    )

    search_results.change(fn=lambda p: p or "", inputs=[search_results], outputs=[path_input])

    lookup_btn.click(
        fn=path_lookup_handler,
        inputs=[parsed_data_state, path_input],
        outputs=[value_output, dot_path_output, lookup_status],
    )

    ts_btn.click(
        fn=generate_ts_handler,
        inputs=[
            parsed_data_state,
            ts_root_name,
            ts_sample,
            ts_enum_strings,
            ts_enum_max,
            ts_enum_max_len,
            ts_enum_numbers,
            ts_enum_num_max,
            ts_detect_date,
        ],
        outputs=[ts_output],
    )

    extract_preview_btn.click(
        fn=extract_preview_handler,
        inputs=[parsed_data_state, extract_paths, extract_expand, extract_joiner, extract_placeholder],
        outputs=[extract_preview, extract_status],
    )

    export_btn.click(
        fn=export_table_handler,
        inputs=[parsed_data_state, extract_paths, extract_expand, extract_joiner, extract_placeholder, output_format, output_filename],
        outputs=[download_output, extract_status],
    )

    diff_btn.click(fn=diff_handler, inputs=[diff_left, diff_right], outputs=[diff_report])

    stats_btn.click(fn=stats_handler, inputs=[parsed_data_state], outputs=[stats_report])
    mask_btn.click(fn=mask_handler, inputs=[parsed_data_state, mask_rules], outputs=[masked_output, mask_log])

    clear_metrics_btn.click(fn=partial(clear_metrics_handler, monitor=monitor), inputs=None, outputs=[metrics_report])

    save_settings_btn.click(
        fn=partial(save_settings_handler, settings=settings_store),
        inputs=[auto_decode, sort_keys, parse_nested, ts_root_name],
        outputs=[status_msg],
    )

    demo.load(fn=partial(history_choices_handler, history=history_store), inputs=None, outputs=[history_selector])
    demo.load(
        fn=partial(load_settings_handler, settings=settings_store),
        inputs=None,
        outputs=[auto_decode, sort_keys, parse_nested, ts_root_name],
    )

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    demo.launch()
