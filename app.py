import gradio as gr
from functools import partial

from json_mock_designer.config import Settings
from json_mock_designer.field_types import configure_faker, get_available_field_types
from json_mock_designer.handlers import (
    ALL_CATEGORIES,
    DEFAULT_TEMPLATE_ID,
    handle_add_field,
    handle_clear_error,
    handle_editor_input,
    handle_editor_mode,
    handle_export,
    handle_file_import,
    handle_force_sync,
    handle_form_edit,
    handle_format,
    handle_remove_field,
    handle_template_filter,
    handle_template_select,
    poll_sync,
    start_session,
    template_categories,
    template_choices,
)
from json_mock_designer.logging_setup import configure_logging

settings = Settings.from_env()
logger = configure_logging(settings.app_name, settings.log_level)
configure_faker(settings.faker_locale, settings.faker_seed)

# --- UI Definition ---
with gr.Blocks(title="JSON Mock Designer") as demo:
    gr.Markdown("# JSON Mock Designer")
    gr.Markdown("Describe a JSON shape in the form or paste an example into the editor; both views stay in sync.")

    # State
    session_state = gr.State()
    revision_state = gr.State(value=0)

    with gr.Row():
        # Left Panel: Form
        with gr.Column(scale=1):
            gr.Markdown("### 1. Start")
            with gr.Row():
                template_search = gr.Textbox(label="Search Templates", placeholder="user, api, pagination...")
                template_category = gr.Dropdown(
                    label="Category",
                    choices=template_categories(),
                    value=ALL_CATEGORIES,
                    interactive=True,
                )
            template_selector = gr.Dropdown(
                label="Template",
                choices=template_choices(),
                value=DEFAULT_TEMPLATE_ID,
                interactive=True,
            )
            file_input = gr.File(label="Import example JSON", file_types=[".json"])
            status_msg = gr.Textbox(label="Status", interactive=False)

            gr.Markdown("### 2. Fields")
            gr.Markdown(
                "Types: " + ", ".join(f"`{name}`" for name, _ in get_available_field_types())
            )
            form_table = gr.Dataframe(
                headers=["Path", "Key", "Type", "Value", "Length"],
                datatype=["str", "str", "str", "str", "number"],
                col_count=(5, "fixed"),
                interactive=True,
                label="Schema Fields",
            )
            apply_form_btn = gr.Button("Apply Form Changes")
            with gr.Row():
                field_path = gr.Textbox(label="Field Path", placeholder="0.1 (empty = root)")
                add_field_btn = gr.Button("Add Field")
                remove_field_btn = gr.Button("Remove Field", variant="stop")

        # Right Panel: JSON Editor & Preview
        with gr.Column(scale=1):
            gr.Markdown("### 3. JSON Editor")
            editor_mode = gr.Checkbox(label="Edit as JSON", value=False)
            editor = gr.Code(label="JSON", language="json", interactive=True)
            validation_msg = gr.Textbox(label="Validation", interactive=False)
            with gr.Row():
                format_btn = gr.Button("Format JSON")
                sync_btn = gr.Button("Sync Now")
                clear_error_btn = gr.Button("Clear Error")

            gr.Markdown("### 4. Preview & Export")
            preview = gr.JSON(label="Generated Response")
            output_filename = gr.Textbox(label="Output Filename (optional)", placeholder="mocklyst-schema")
            export_btn = gr.Button("Export JSON", variant="primary")
            download_output = gr.File(label="Download Result")

    session_outputs = [session_state, revision_state, editor, form_table, validation_msg, preview, status_msg]

    demo.load(
        fn=partial(start_session, settings=settings),
        inputs=[template_selector],
        outputs=session_outputs,
    )

    for filter_input in (template_search, template_category):
        filter_input.change(
            fn=handle_template_filter,
            inputs=[template_search, template_category],
            outputs=[template_selector, status_msg],
        )

    template_selector.change(
        fn=partial(handle_template_select, settings=settings),
        inputs=[session_state, template_selector],
        outputs=session_outputs,
    )

    file_input.upload(
        fn=handle_file_import,
        inputs=[session_state, file_input],
        outputs=session_outputs,
    )

    editor.input(
        fn=handle_editor_input,
        inputs=[session_state, editor],
        outputs=[validation_msg],
    )

    apply_form_btn.click(
        fn=handle_form_edit,
        inputs=[session_state, form_table],
        outputs=session_outputs,
    )

    add_field_btn.click(
        fn=handle_add_field,
        inputs=[session_state, field_path],
        outputs=session_outputs,
    )

    remove_field_btn.click(
        fn=handle_remove_field,
        inputs=[session_state, field_path],
        outputs=session_outputs,
    )

    format_btn.click(
        fn=handle_format,
        inputs=[session_state],
        outputs=[editor, status_msg],
    )

    editor_mode.change(
        fn=handle_editor_mode,
        inputs=[session_state, editor_mode],
        outputs=session_outputs,
    )

    clear_error_btn.click(
        fn=handle_clear_error,
        inputs=[session_state],
        outputs=[validation_msg],
    )

    sync_btn.click(
        fn=handle_force_sync,
        inputs=[session_state],
        outputs=session_outputs,
    )

    export_btn.click(
        fn=handle_export,
        inputs=[session_state, output_filename],
        outputs=[download_output, status_msg],
    )

    sync_timer = gr.Timer(settings.sync_poll_seconds)
    sync_timer.tick(
        fn=poll_sync,
        inputs=[session_state, revision_state],
        outputs=[revision_state, form_table, validation_msg, preview],
    )

if __name__ == "__main__":
    logger.info("Starting %s", settings.app_name)
    demo.launch()
