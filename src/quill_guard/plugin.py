from data_designer.plugins.plugin import Plugin, PluginType

content_check_plugin = Plugin(
    config_qualified_name="quill_guard.config.ContentCheckColumnConfig",
    impl_qualified_name="quill_guard.generator.ContentCheckColumnGenerator",
    plugin_type=PluginType.COLUMN_GENERATOR,
)
