"""Menu bar, toolbar and menu action handlers for CalendarEditor"""

from datetime import date

from PyQt5.QtWidgets import QActionGroup, QInputDialog, QFileDialog, QColorDialog, QMessageBox

from components.interaction import Tool
from models.layer import LayerVariant
from services.batch_import import import_json_into
from services.template_selector import TemplateMode, TemplateVariant
from utils.logger import notify_error


class MenuMixin:
    """Menu bar, toolbar and menu action handlers"""

    def _create_menu_bar(self):
        """Create the menu bar with File, Edit, Page, Insert, Template, View, Generate menus"""
        menubar = self.menuBar()

        # File Menu
        file_menu = menubar.addMenu("&File")

        self.import_json_action = file_menu.addAction("Import Batch &JSON...")
        self.import_json_action.setShortcut("Ctrl+O")
        self.import_json_action.triggered.connect(self._import_json_dialog)

        self.import_table_action = file_menu.addAction("Import &Spreadsheet...")
        self.import_table_action.setShortcut("Ctrl+Shift+O")
        self.import_table_action.triggered.connect(self._import_table_dialog)

        # Recent Imports submenu
        self.recent_menu = file_menu.addMenu("Recent Imports")
        self._update_recent_files_menu()

        file_menu.addSeparator()

        self.export_png_action = file_menu.addAction("Export Page as &PNG...")
        self.export_png_action.setShortcut("Ctrl+E")
        self.export_png_action.triggered.connect(self.export_page_png)

        self.export_pdf_action = file_menu.addAction("Export Batch as P&DF...")
        self.export_pdf_action.setShortcut("Ctrl+Shift+E")
        self.export_pdf_action.triggered.connect(self.export_batch_pdf)

        file_menu.addSeparator()

        exit_action = file_menu.addAction("E&xit")
        exit_action.setShortcut("Alt+F4")
        exit_action.triggered.connect(self.close)

        # Edit Menu
        # Undo/redo/delete keys are handled by the controller so text fields keep them
        self.edit_menu = menubar.addMenu("&Edit")

        self.undo_action = self.edit_menu.addAction("&Undo\tCtrl+Z")
        self.undo_action.triggered.connect(self.undo)
        self.undo_action.setEnabled(False)

        self.redo_action = self.edit_menu.addAction("&Redo\tCtrl+Y")
        self.redo_action.triggered.connect(self.redo)
        self.redo_action.setEnabled(False)

        self.edit_menu.addSeparator()

        delete_action = self.edit_menu.addAction("&Delete\tDel")
        delete_action.triggered.connect(self.controller.delete_selection)

        color_action = self.edit_menu.addAction("&Color...")
        color_action.triggered.connect(self._choose_color)

        font_size_action = self.edit_menu.addAction("&Font Size...")
        font_size_action.triggered.connect(self._choose_font_size)

        # Page Menu
        page_menu = menubar.addMenu("&Page")

        self.prev_action = page_menu.addAction("&Previous Page")
        self.prev_action.setShortcut("PgUp")
        self.prev_action.triggered.connect(self.store.prev_page)

        self.next_action = page_menu.addAction("&Next Page")
        self.next_action.setShortcut("PgDown")
        self.next_action.triggered.connect(self.store.next_page)

        page_menu.addSeparator()

        go_to_date_action = page_menu.addAction("&Go to Date...")
        go_to_date_action.triggered.connect(self._go_to_date)

        map_images_action = page_menu.addAction("&Map Images...")
        map_images_action.triggered.connect(self._map_images)

        page_menu.addSeparator()

        background_action = page_menu.addAction("&Background Color...")
        background_action.triggered.connect(lambda: self._choose_theme_color('background_color'))

        primary_action = page_menu.addAction("P&rimary Color...")
        primary_action.triggered.connect(lambda: self._choose_theme_color('primary_color'))

        text_color_action = page_menu.addAction("&Text Color...")
        text_color_action.triggered.connect(lambda: self._choose_theme_color('text_color'))

        # Insert Menu
        insert_menu = menubar.addMenu("&Insert")

        self.add_rect_action = insert_menu.addAction("&Rectangle")
        self.add_rect_action.triggered.connect(lambda: self.controller.add_layer(LayerVariant.RECT))

        self.add_circle_action = insert_menu.addAction("&Circle")
        self.add_circle_action.triggered.connect(lambda: self.controller.add_layer(LayerVariant.CIRCLE))

        self.add_text_action = insert_menu.addAction("&Text")
        self.add_text_action.triggered.connect(lambda: self.controller.add_layer(LayerVariant.TEXT))

        # Template Menu
        template_menu = menubar.addMenu("&Template")
        mode_group = QActionGroup(self)
        mode_group.setExclusive(True)
        for mode in TemplateMode:
            label = "Auto" if mode == TemplateMode.AUTO else f"Template {mode.value}"
            action = template_menu.addAction(label)
            action.setCheckable(True)
            action.setChecked(mode == TemplateMode.AUTO)
            action.triggered.connect(lambda checked, m=mode: self._set_template_mode(m))
            mode_group.addAction(action)

        template_menu.addSeparator()

        save_template_action = template_menu.addAction("&Save as Custom Template...")
        save_template_action.triggered.connect(self._save_custom_template)

        self.custom_template_menu = template_menu.addMenu("&Apply Custom Template")
        self._update_custom_template_menu()

        # View Menu
        view_menu = menubar.addMenu("&View")
        tool_group = QActionGroup(self)
        tool_group.setExclusive(True)

        self.select_tool_action = view_menu.addAction("&Select Tool")
        self.select_tool_action.setCheckable(True)
        self.select_tool_action.setChecked(True)
        self.select_tool_action.triggered.connect(lambda: self._set_tool(Tool.SELECT))
        tool_group.addAction(self.select_tool_action)

        self.hand_tool_action = view_menu.addAction("&Hand Tool")
        self.hand_tool_action.setCheckable(True)
        self.hand_tool_action.triggered.connect(lambda: self._set_tool(Tool.HAND))
        tool_group.addAction(self.hand_tool_action)

        view_menu.addSeparator()

        self.zoom_in_action = view_menu.addAction("Zoom &In")
        self.zoom_in_action.setShortcut("Ctrl+=")
        self.zoom_in_action.triggered.connect(self.controller.zoom_in)

        self.zoom_out_action = view_menu.addAction("Zoom &Out")
        self.zoom_out_action.setShortcut("Ctrl+-")
        self.zoom_out_action.triggered.connect(self.controller.zoom_out)

        reset_view_action = view_menu.addAction("&Reset View")
        reset_view_action.setShortcut("Ctrl+0")
        reset_view_action.triggered.connect(self._reset_view)

        # Generate Menu
        generate_menu = menubar.addMenu("&Generate")

        generate_content_action = generate_menu.addAction("Generate &Content")
        generate_content_action.triggered.connect(lambda: self.generate_content())

        generate_image_action = generate_menu.addAction("Generate &Image")
        generate_image_action.triggered.connect(lambda: self.generate_image())

        # Triggers disabled while their collaborator is busy
        self.action_for_task = {
            self.content_task.name: [generate_content_action],
            self.image_task.name: [generate_image_action],
            self.export_task.name: [self.export_png_action, self.export_pdf_action],
        }

    def _create_toolbar(self):
        """Main toolbar with the most used actions"""
        toolbar = self.addToolBar("Main")
        toolbar.setMovable(False)
        toolbar.addAction(self.prev_action)
        toolbar.addAction(self.next_action)
        toolbar.addSeparator()
        toolbar.addAction(self.add_rect_action)
        toolbar.addAction(self.add_circle_action)
        toolbar.addAction(self.add_text_action)
        toolbar.addSeparator()
        toolbar.addAction(self.select_tool_action)
        toolbar.addAction(self.hand_tool_action)
        toolbar.addAction(self.zoom_out_action)
        toolbar.addAction(self.zoom_in_action)
        toolbar.addSeparator()
        toolbar.addAction(self.undo_action)
        toolbar.addAction(self.redo_action)
        toolbar.addSeparator()
        toolbar.addAction(self.import_json_action)
        toolbar.addAction(self.import_table_action)

    # ========================================
    # Import
    # ========================================

    def _import_json_dialog(self):
        """Paste or load a JSON array of pages"""
        text, ok = QInputDialog.getMultiLineText(self, "Import Batch JSON", "Paste a JSON array of pages:")
        if ok and text.strip():
            if import_json_into(self.store, text):
                self.statusBar().showMessage(f"Imported {len(self.store)} page(s)", 3000)

    def _import_table_dialog(self):
        filename, _ = QFileDialog.getOpenFileName(
            self, "Import Batch", "", "Batch Files (*.json *.csv *.xlsx *.xls);;All Files (*)"
        )
        if filename:
            self.import_batch_file(filename)

    # ========================================
    # Edit / page handlers
    # ========================================

    def _choose_color(self):
        if self.controller.selected_id is None:
            return
        color = QColorDialog.getColor(parent=self)
        if color.isValid():
            self.controller.apply_color(color.name())

    def _choose_font_size(self):
        if self.controller.selected_id is None:
            return
        size, ok = QInputDialog.getInt(self, "Font Size", "Font size (px):", 16, 8, 400)
        if ok:
            self.controller.apply_font_size(size)

    def _go_to_date(self):
        current = self.store.current.date_gregorian
        text, ok = QInputDialog.getText(self, "Go to Date", "Date (YYYY-MM-DD):", text=current)
        if not ok:
            return
        try:
            picked = date.fromisoformat(text.strip())
            self.store.select_date(picked.year, picked.month, picked.day, self.lunar_converter)
        except ValueError as e:
            QMessageBox.warning(self, "Invalid Date", str(e))

    def _map_images(self):
        filenames, _ = QFileDialog.getOpenFileNames(
            self, "Map Images to Pages", "", "Images (*.png *.jpg *.jpeg *.webp *.gif);;All Files (*)"
        )
        if filenames:
            mapped = self.store.map_images(sorted(filenames))
            self.statusBar().showMessage(f"Mapped {mapped} image(s)", 3000)

    def _choose_theme_color(self, key):
        color = QColorDialog.getColor(parent=self)
        if color.isValid():
            self.store.set_theme(**{key: color.name()})

    # ========================================
    # Templates and tools
    # ========================================

    def _set_template_mode(self, mode):
        self.controller.set_template_mode(mode)
        self._update_status_bar()
        self.canvas_widget.update()

    def _save_custom_template(self):
        name, ok = QInputDialog.getText(self, "Save Custom Template", "Template name:")
        if not ok:
            return
        try:
            self.store.save_custom_template(name, self.controller.active_variant())
        except ValueError as e:
            notify_error("Save Custom Template", str(e))
            return
        self._update_custom_template_menu()

    def _update_custom_template_menu(self):
        self.custom_template_menu.clear()
        templates = self.store.custom_templates
        if not templates:
            none_action = self.custom_template_menu.addAction("No custom templates")
            none_action.setEnabled(False)
            return
        for template in templates:
            action = self.custom_template_menu.addAction(f"{template.name} ({TemplateVariant(template.base_variant).value})")
            action.triggered.connect(lambda checked, tid=template.id: self.store.apply_custom_template(tid))

    def _set_tool(self, tool):
        self.controller.set_tool(tool)
        self.statusBar().showMessage(f"{tool.value.title()} tool", 1500)

    def _reset_view(self):
        self.controller.view.reset_view()
        self.controller.viewChanged.emit()
