"""
上游响应整形
"""

from typing import Any

# PLN 查询结果固定输出的字段及缺省值
PLN_INQUIRY_DEFAULTS = {
    "status": "Gagal",
    "message": "No message",
    "customer_no": "N/A",
    "meter_no": "N/A",
    "subscriber_id": "N/A",
    "name": "N/A",
    "segment_power": "N/A",
    "rc": "N/A",
}


def normalize_pln_inquiry(upstream_body: Any) -> dict[str, Any]:
    """
    把上游 inquiry-pln 响应整形为固定的扁平结构

    字段取自上游的 data 对象；缺失、None 或空字符串一律用缺省值，
    输出永远包含全部键。
    """
    data: Any = {}
    if isinstance(upstream_body, dict):
        data = upstream_body.get("data") or {}
    if not isinstance(data, dict):
        data = {}

    normalized = {}
    for key, default in PLN_INQUIRY_DEFAULTS.items():
        value = data.get(key)
        normalized[key] = default if value is None or value == "" else value
    return normalized
