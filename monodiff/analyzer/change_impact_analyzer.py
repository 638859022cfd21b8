import os

from monodiff import settings
from monodiff.analyzer.dependency_graph import DependencyGraph
from monodiff.analyzer.file_resolver import map_files_to_packages
from monodiff.analyzer.impact_computer import compute_impact
from monodiff.analyzer.workspace_scanner import WorkspaceScanner
from monodiff.schema.schema import ImpactReport
from monodiff.utils.git_util import GitUtil
from monodiff.utils.log_util import log
from monodiff.utils.rich_console import StepInfo, display_workspace, run_function_with_spinner


class ChangeImpactAnalyzer:
    """git diff => パッケージ検出 => 依存グラフ => 所有パッケージ判定 => 影響範囲 の順に実行する"""

    def __init__(self, root: str, max_workers: int | None = None, root_claims_unowned: bool | None = None):
        self.root = os.path.abspath(root)
        if max_workers is None:
            # 設定エラーはgit diffを実行する前に出す
            max_workers = WorkspaceScanner.default_max_workers()
        self.max_workers = max_workers
        if root_claims_unowned is None:
            root_claims_unowned = settings.root_claims_unowned
        self.root_claims_unowned = root_claims_unowned

    def analyze(self, from_ref: str, to_ref: str = "HEAD") -> ImpactReport:
        """from_ref..to_ref の変更の影響範囲を分析"""
        step_info = StepInfo(
            description=f"git diff {from_ref}..{to_ref}", error_message="変更ファイルの取得に失敗しました"
        )
        files = run_function_with_spinner(step_info, GitUtil.changed_files, self.root, from_ref, to_ref)
        return self.analyze_files(files, from_ref, to_ref)

    def analyze_files(self, files: list[str], from_ref: str = "", to_ref: str = "HEAD") -> ImpactReport:
        """変更ファイルの一覧(リポジトリルート相対)から影響範囲を分析"""
        log("root= %s, files(len)= %d", self.root, len(files))

        # パッケージを検出
        scanner = WorkspaceScanner(self.root, max_workers=self.max_workers)
        step_info = StepInfo(description=f"scanning {self.root}", error_message="パッケージの検出に失敗しました")
        workspace = run_function_with_spinner(step_info, scanner.scan_project)

        # 依存グラフを構築
        graph = DependencyGraph(workspace)
        dependencies = graph.forward_adjacency()
        if settings.is_debug:
            display_workspace(workspace, dependencies)

        # 変更ファイル => 変更パッケージ => 影響パッケージ
        changed = map_files_to_packages(files, workspace, root_claims_unowned=self.root_claims_unowned)
        impacted = compute_impact(workspace, graph.reverse_adjacency(), changed)
        log("changed= %s, impacted= %s", sorted(changed), sorted(impacted))

        return ImpactReport(
            from_ref=from_ref,
            to_ref=to_ref,
            changed=sorted(changed),
            impacted=sorted(impacted),
            graph=dependencies,
        )
