import os
import sys
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from pydantic import ValidationError
from tqdm import tqdm

from monodiff import settings
from monodiff.schema.errors import ConfigError, DuplicatePackageError, ManifestError, MonodiffError, TraversalError
from monodiff.schema.schema import Package, PackageManifest, Workspace
from monodiff.utils.file_util import FileUtil
from monodiff.utils.log_util import log, log_inout


class WorkspaceScanner:
    """リポジトリを走査してpackage.jsonからパッケージ一覧(Workspace)を作るクラス

    マニフェストの探索は1回の走査で逐次に行い、読み込みと解析だけをスレッドプールで並列に行う。
    Workspaceへの登録はロックで直列化する。
    """

    def __init__(self, root: str, max_workers: int | None = None):
        self.root = os.path.abspath(root)
        if max_workers is None:
            max_workers = self.default_max_workers()
        self.max_workers = max(1, min(max_workers, settings.max_workers_cap))
        self.packages: Workspace = {}
        self._manifest_paths: dict[str, str] = {}  # パッケージ名 => マニフェストのroot相対パス(重複検出用)
        self._lock = threading.Lock()

    @staticmethod
    def default_max_workers() -> int:
        """MONODIFF_MAX_WORKERSから並列数を決める(未設定ならCPU数ベースの既定値)"""
        value = settings.max_workers_env.strip()
        if not value:
            return settings.max_workers_default
        try:
            return int(value)
        except ValueError as e:
            raise ConfigError("MONODIFF_MAX_WORKERS", value, "not an integer") from e

    @log_inout
    def scan_project(self) -> Workspace:
        """プロジェクト全体をスキャンしてパッケージ一覧を構築"""
        self.packages = {}
        self._manifest_paths = {}
        manifest_paths = self.find_manifests()
        log("manifest_paths(len)= %d", len(manifest_paths))
        if not manifest_paths:
            return self.packages

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self._load_package, manifest_path) for manifest_path in manifest_paths]
            self._wait_all(futures)

        return self.packages

    def find_manifests(self) -> list[str]:
        """マニフェストのroot相対パスをソートして返す"""
        # ルート自身が除外ディレクトリ名なら何も探さない
        if FileUtil.base_name(self.root) in settings.ignore_dir_names:
            return []

        manifest_paths = []
        for dir_path, dir_names, file_names in os.walk(self.root, onerror=self._raise_traversal_error):
            # 除外ディレクトリ(node_modules, .git)配下は探索しない
            dir_names[:] = sorted(d for d in dir_names if d not in settings.ignore_dir_names)

            manifest_names = sorted(f for f in file_names if f.lower() == settings.manifest_file_name)
            if len(manifest_names) > 1:
                # 大文字小文字違いのマニフェストが同じディレクトリにあるとパスが一意にならない
                rel_dir = FileUtil.to_rel_dir(self.root, os.path.join(dir_path, manifest_names[0]))
                raise ManifestError(
                    os.path.join(rel_dir, manifest_names[0]), f"multiple manifests in one directory: {manifest_names}"
                )
            for manifest_name in manifest_names:
                manifest_path = os.path.join(dir_path, manifest_name)
                manifest_paths.append(os.path.relpath(manifest_path, self.root))

        return sorted(manifest_paths)

    def _wait_all(self, futures: list[Future]) -> None:
        progress_bar = tqdm(
            total=len(futures),
            unit="manifests",
            file=sys.stderr,
            desc="scan_manifests",
            disable=not settings.show_progress,
        )
        try:
            for future in as_completed(futures):
                future.result()
                progress_bar.update(1)
        except MonodiffError:
            # 未着手の解析は捨てる(実行中のものは現在のマニフェストを終えてから止まる)
            for pending in futures:
                pending.cancel()
            raise
        finally:
            progress_bar.close()

    def _load_package(self, manifest_rel_path: str) -> Package:
        manifest_path = os.path.join(self.root, manifest_rel_path)
        content = FileUtil.read_file(manifest_path)
        manifest = self.parse_manifest(content, manifest_rel_path)
        package = Package(
            name=self._resolve_name(manifest, manifest_rel_path),
            path=FileUtil.to_rel_dir(self.root, manifest_path),
            dependencies=manifest.merged_dependencies(),
        )
        self._add_package(package, manifest_rel_path)
        return package

    @staticmethod
    def parse_manifest(content: str, manifest_rel_path: str) -> PackageManifest:
        """マニフェストの中身を解析(JSONとして不正、または型が合わない場合はManifestError)"""
        try:
            return PackageManifest.model_validate_json(content)
        except ValidationError as e:
            reasons = "; ".join(f"{'.'.join(map(str, err['loc'])) or '<root>'}: {err['msg']}" for err in e.errors())
            raise ManifestError(manifest_rel_path, reasons) from e

    def _resolve_name(self, manifest: PackageManifest, manifest_rel_path: str) -> str:
        # nameが無ければディレクトリ名(ルートのマニフェストならルートディレクトリ名)
        if manifest.name:
            return manifest.name
        rel_dir = os.path.dirname(manifest_rel_path)
        if rel_dir:
            return FileUtil.base_name(rel_dir)
        return FileUtil.base_name(self.root)

    def _add_package(self, package: Package, manifest_rel_path: str) -> None:
        with self._lock:
            if package.name in self.packages:
                raise DuplicatePackageError(package.name, self._manifest_paths[package.name], manifest_rel_path)
            self.packages[package.name] = package
            self._manifest_paths[package.name] = manifest_rel_path

    @staticmethod
    def _raise_traversal_error(error: OSError) -> None:
        raise TraversalError(error.filename or "", error.strerror or str(error)) from error
