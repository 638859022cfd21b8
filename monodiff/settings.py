import os
from os.path import dirname, join

from dotenv import load_dotenv

load_dotenv()

dotenv_path = join(dirname(__file__), ".env")
load_dotenv(dotenv_path)


def _get_bool(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() in ("true", "1", "t")


# mode
is_debug = _get_bool("IS_DEBUG", "False")  # デバッグモード(例: IS_DEBUG=True)
show_progress = _get_bool("MONODIFF_SHOW_PROGRESS", "False")  # マニフェスト解析の進捗をstderrに表示

# workers(マニフェスト解析の並列数)
max_workers_cap = 12
max_workers_default = min(os.cpu_count() or 4, max_workers_cap)
max_workers_env = os.getenv("MONODIFF_MAX_WORKERS", "")  # 空ならmax_workers_default、整数でなければConfigError

# git
git_command = os.getenv("MONODIFF_GIT", "git")

# log(空の場合はファイル出力しない)
log_file = os.getenv("MONODIFF_LOG_FILE", "")

# workspace
manifest_file_name = "package.json"  # 大文字小文字を区別せずに比較する
ignore_dir_names = ["node_modules", ".git"]  # 大文字小文字を区別して比較する
root_claims_unowned = _get_bool("MONODIFF_ROOT_CLAIMS_UNOWNED", "True")  # どのパッケージにも属さないファイルをルートパッケージに割り当てる

