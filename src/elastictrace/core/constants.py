"""常量定义模块."""

# 默认索引前缀，按天生成索引名 zipkin-yyyy-MM-dd
DEFAULT_INDEX = "zipkin"

# 默认集群地址
DEFAULT_HOSTS = ("http://localhost:9200",)

# 进程内对任意 ES 节点的最大并发请求数
DEFAULT_MAX_REQUESTS = 64

# 单次请求超时时间（秒）
DEFAULT_REQUEST_TIMEOUT = 10.0

DEFAULT_INDEX_SHARDS = 5
DEFAULT_INDEX_REPLICAS = 1

# 非聚合查询返回的最大文档数，即 ES 默认的 index.max_result_window
MAX_RESULT_WINDOW = 10000

# 宽松查询参数，按字母序排列，便于下游请求签名
LENIENT_SEARCH_PARAMS = (
    ("allow_no_indices", "true"),
    ("expand_wildcards", "open"),
    ("ignore_unavailable", "true"),
)

APPLICATION_JSON = "application/json"
APPLICATION_NDJSON = "application/x-ndjson"

# 索引名日期部分格式
DATE_FORMAT = "%Y-%m-%d"
