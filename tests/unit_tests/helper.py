import json
import os
import shutil
import tempfile
import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from monodiff.schema.schema import Package, Workspace


class MockManager:
    """複数のモックをmock_nameという名前でアクセスできるようにするクラス"""

    def __init__(self):
        self.mock_dict: dict[str, MagicMock] = {}

    def _set_mock(self, mock_name: str, mock_target: str, return_value: Any = ""):
        # モックを生成してreturn_valueを設定
        instance = MagicMock()
        instance.return_value = return_value
        patcher = patch(mock_target, instance)
        self.mock_dict[mock_name] = patcher.start()

    def _get_mock(self, mock_name: str) -> None | MagicMock:
        return self.mock_dict.get(mock_name)

    def get_mock(self, mock_name: str) -> MagicMock:
        mock = self._get_mock(mock_name)
        if mock is None:
            raise KeyError(mock_name)
        return mock

    def get_mock_call_count(self, mock_name: str) -> int:
        return self.get_mock(mock_name).call_count

    def set_mock_return_value(self, mock_target: str = "", mock_alias: str = "", return_value: Any = "") -> None:
        # モックをmock_dictから取り出すときの名前
        mock_name = mock_alias if mock_alias else mock_target
        if not mock_name:
            return

        mock = self._get_mock(mock_name)
        if mock:
            # 既存のモックに値だけ設定
            mock.return_value = return_value
        else:
            # 新規のモックを作成
            self._set_mock(mock_name, mock_target, return_value)

    def set_mock_side_effect(self, mock_target: str = "", mock_alias: str = "", side_effect: Any = None) -> None:
        # サイドエフェクトを持つモックを設定
        mock_name = mock_alias if mock_alias else mock_target
        if mock_name not in self.mock_dict:
            self._set_mock(mock_name, mock_target)
        self.mock_dict[mock_name].side_effect = side_effect


class BaseTestCase(unittest.TestCase):
    def setUp(self):
        self.mock_manager = MockManager()
        self.temp_dirs: list[str] = []

    def tearDown(self):
        # モックを停止
        patch.stopall()
        for temp_dir in self.temp_dirs:
            shutil.rmtree(temp_dir, ignore_errors=True)

    def check_mock_call_count(self, mock_name: str, expected_count: int):
        self.assertEqual(self.mock_manager.get_mock_call_count(mock_name), expected_count, mock_name)

    def set_mock_return_value(self, mock_target: str = "", mock_alias: str = "", return_value: Any = ""):
        self.mock_manager.set_mock_return_value(
            mock_target=mock_target, mock_alias=mock_alias, return_value=return_value
        )

    def set_mock_side_effect(self, mock_target: str = "", mock_alias: str = "", side_effect: Any = None):
        self.mock_manager.set_mock_side_effect(mock_target=mock_target, mock_alias=mock_alias, side_effect=side_effect)

    # =============  workspace  ==============

    def make_repo_dir(self, name: str = "repo") -> str:
        """tearDownで削除される空のリポジトリディレクトリ(ベース名はname)"""
        temp_dir = tempfile.mkdtemp(prefix="monodiff_test_")
        self.temp_dirs.append(temp_dir)
        repo_dir = os.path.join(temp_dir, name)
        os.makedirs(repo_dir)
        return repo_dir

    def write_file(self, root: str, rel_path: str, content: str = "") -> str:
        file_path = os.path.join(root, *rel_path.split("/"))
        os.makedirs(os.path.dirname(file_path), exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(content)
        return file_path

    def write_manifest(self, root: str, rel_dir: str, manifest: dict[str, Any] | str) -> str:
        """rel_dir(空文字ならルート)にpackage.jsonを書く(strならそのまま書く)"""
        content = manifest if isinstance(manifest, str) else json.dumps(manifest)
        rel_path = f"{rel_dir}/package.json" if rel_dir else "package.json"
        return self.write_file(root, rel_path, content)

    def make_workspace_dir(self, manifests: dict[str, dict[str, Any] | str], name: str = "repo") -> str:
        """{ディレクトリ: マニフェスト} からリポジトリを作る"""
        repo_dir = self.make_repo_dir(name)
        for rel_dir, manifest in manifests.items():
            self.write_manifest(repo_dir, rel_dir, manifest)
        return repo_dir


def make_workspace(*packages: tuple[str, str, dict[str, str]]) -> Workspace:
    """(name, path, dependencies) のタプルからメモリ上のWorkspaceを作る(pathは/区切りで書く)"""
    workspace: Workspace = {}
    for name, path, dependencies in packages:
        workspace[name] = Package(name=name, path=os.path.normpath(path) if path else "", dependencies=dependencies)
    return workspace
