"""Configuration management for CalendarEditor"""

import os
import json
from utils.logger import loggerRaise
from utils.path_resolver import get_config_dir, get_config_file
from constants import DEFAULT_COLLABORATOR_TIMEOUT_S


class ConfigMixin:
	"""Settings file: recent imports and collaborator timeout

	The history capacity is fixed and deliberately not a setting.
	"""

	max_recent_files = 10

	def _init_config(self):
		"""Set defaults and load the settings file"""
		self.config_dir = str(get_config_dir())
		self.config_file = str(get_config_file())
		self.recent_files = []
		self.collaborator_timeout_s = DEFAULT_COLLABORATOR_TIMEOUT_S
		self._load_config()

	def _load_config(self):
		"""Load recent files and settings from config file"""
		try:
			if os.path.exists(self.config_file):
				with open(self.config_file, 'r', encoding='utf-8') as f:
					config = json.load(f)
				self.recent_files = [p for p in config.get('recent_files', []) if os.path.exists(p)]
				timeout = config.get('collaborator_timeout_s', DEFAULT_COLLABORATOR_TIMEOUT_S)
				if isinstance(timeout, (int, float)) and timeout > 0:
					self.collaborator_timeout_s = float(timeout)
		except (OSError, ValueError) as e:
			loggerRaise(e, "Error loading config")

	def _save_config(self):
		"""Save recent files and settings to config file"""
		try:
			os.makedirs(self.config_dir, exist_ok=True)

			config = {
				'recent_files': self.recent_files[:self.max_recent_files],
				'collaborator_timeout_s': self.collaborator_timeout_s,
			}

			with open(self.config_file, 'w', encoding='utf-8') as f:
				json.dump(config, f, indent=2)
		except OSError as e:
			loggerRaise(e, "Error saving config")

	def _add_to_recent_files(self, filepath):
		"""Add an imported file to the front of the recent files list"""
		if filepath in self.recent_files:
			self.recent_files.remove(filepath)
		self.recent_files.insert(0, filepath)
		self.recent_files = self.recent_files[:self.max_recent_files]

		if hasattr(self, 'recent_menu'):
			self._update_recent_files_menu()

		self._save_config()

	def _update_recent_files_menu(self):
		"""Update the Recent Imports submenu"""
		self.recent_menu.clear()

		if not self.recent_files:
			no_recent = self.recent_menu.addAction("No recent files")
			no_recent.setEnabled(False)
			return

		for filepath in self.recent_files:
			action = self.recent_menu.addAction(os.path.basename(filepath))
			action.setToolTip(filepath)
			action.triggered.connect(lambda checked, f=filepath: self.import_batch_file(f))

		self.recent_menu.addSeparator()
		clear_action = self.recent_menu.addAction("Clear Recent Files")
		clear_action.triggered.connect(self._clear_recent_files)

	def _clear_recent_files(self):
		"""Clear the recent files list"""
		self.recent_files = []
		self._update_recent_files_menu()
		self._save_config()
