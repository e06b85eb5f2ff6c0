from collections.abc import Mapping
from typing import Any

from pkg.crypto import EncryptionAlgorithm, get_crypto_class
from pkg.logger import logger

SIGN_KEY = "sign"


def filter_params(params: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    除去参数中的空值和签名参数

    :param params: 原始参数
    :return: 过滤后的新字典（不修改入参）
    """
    if not params:
        return {}
    return {k: v for k, v in params.items() if v and k != SIGN_KEY}


def to_query_string(params: Mapping[str, Any]) -> str:
    """
    将所有参数按 key 升序排列，以 "参数=参数值" 的模式用 "&" 拼接成字符串，值不做 URL 编码

    :param params: 参数字典
    :return: 待签名字符串，空字典返回 ""
    """
    return "&".join(f"{k}={params[k]}" for k in sorted(params))


def canonicalize(params: Mapping[str, Any] | None) -> str:
    """签名、验签、加密统一使用的规范化字符串"""
    return to_query_string(filter_params(params))


class RSASignatureHandler:
    """
    基于 RSA2 (SHA256WithRSA) 的参数签名处理器

    签名与验签两条路径都经过 canonicalize()，保证规范化字符串逐字节一致。
    """

    def __init__(self, *, private_key: str | bytes | None = None, public_key: str | bytes | None = None):
        """
        :param private_key: 应用私钥（PEM 文本或文件路径），用于签名和解密
        :param public_key: 对方公钥（PEM 文本或文件路径），用于验签和加密
        """
        self.cipher = get_crypto_class(EncryptionAlgorithm.RSA)(private_key=private_key, public_key=public_key)

    def generate_signature(self, params: Mapping[str, Any]) -> str:
        """
        生成签名字符串
        :param params: 请求参数，sign 字段和空值不参与签名
        :return: Base64 签名
        """
        try:
            return self.cipher.sign(canonicalize(params))
        except Exception as e:
            logger.error(f"generate_signature error: {e}, keys={sorted(params)}")
            raise

    def verify_signature(self, params: Mapping[str, Any], signature: str) -> bool:
        """
        验证签名
        :param params: 原始参数
        :param signature: 待校验的 Base64 签名
        :return: True/False；密钥缺失或损坏时抛出 KeyMaterialError
        """
        verified = self.cipher.verify(canonicalize(params), signature)
        if not verified:
            logger.warning(f"Signature check failed, keys={sorted(params)}")
        return verified

    def sign_params(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """返回追加了 sign 字段的新参数字典"""
        signed = {k: v for k, v in params.items() if k != SIGN_KEY}
        signed[SIGN_KEY] = self.generate_signature(signed)
        return signed

    def encrypt_params(self, params: Mapping[str, Any]) -> str:
        """规范化后使用对方公钥加密，返回 Base64 密文"""
        return self.cipher.encrypt(canonicalize(params))

    def decrypt_params(self, cipher_text: str) -> str:
        """使用应用私钥解密，返回 UTF-8 明文"""
        return self.cipher.decrypt(cipher_text)
