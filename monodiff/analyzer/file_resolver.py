from monodiff import settings
from monodiff.schema.schema import Workspace
from monodiff.utils.file_util import FileUtil
from monodiff.utils.log_util import log_w


def find_owner(file_path: str, workspace: Workspace, *, root_claims_unowned: bool = True) -> str | None:
    """file_pathを含むパッケージのうち、パスが最も長い(=最も内側の)ものの名前を返す

    ルートパッケージは一致長0の候補で、入れ子のパッケージが無いときだけ選ばれる。
    どのパッケージにも含まれなければNone。
    """
    normalized = FileUtil.normalize_rel_path(file_path)
    owner = None
    owner_len = -1
    for name in sorted(workspace):
        package_path = workspace[name].path
        if package_path == "":
            if root_claims_unowned and owner_len < 0:
                owner = name
                owner_len = 0
            continue
        if FileUtil.is_under(normalized, package_path) and len(package_path) > owner_len:
            owner = name
            owner_len = len(package_path)
    return owner


def map_files_to_packages(
    files: list[str], workspace: Workspace, *, root_claims_unowned: bool | None = None
) -> set[str]:
    """変更ファイルを所有パッケージに割り当て、変更パッケージの集合を返す(失敗しない)"""
    if root_claims_unowned is None:
        root_claims_unowned = settings.root_claims_unowned

    changed: set[str] = set()
    unowned_files = []
    for file_path in files:
        owner = find_owner(file_path, workspace, root_claims_unowned=root_claims_unowned)
        if owner is None:
            unowned_files.append(file_path)
            continue
        changed.add(owner)

    if unowned_files:
        log_w("%d changed files belong to no package and are ignored: %s", len(unowned_files), sorted(unowned_files))
    return changed
