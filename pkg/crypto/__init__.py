from typing import Literal, overload

from pkg.crypto.base import (
    _ALGORITHM_REGISTRY,
    BaseCryptoUtil,
    EncryptionAlgorithm,
    KeyMaterialError,
    register_algorithm,
)
from pkg.crypto.rsa import RSACipher, generate_rsa_key_pair


@overload
def get_crypto_class(algo: Literal[EncryptionAlgorithm.RSA]) -> type[RSACipher]: ...


@overload
def get_crypto_class(algo: EncryptionAlgorithm) -> type[BaseCryptoUtil]: ...


def get_crypto_class(algo: EncryptionAlgorithm) -> type[BaseCryptoUtil]:
    """
    根据算法枚举获取对应的加密器类。
    业务层只需要调用这个函数。
    """
    crypto_class = _ALGORITHM_REGISTRY.get(algo)
    if not crypto_class:
        raise NotImplementedError(f"Algorithm '{algo}' is not registered or implemented.")

    return crypto_class


__all__ = [
    "BaseCryptoUtil",
    "EncryptionAlgorithm",
    "KeyMaterialError",
    "RSACipher",
    "generate_rsa_key_pair",
    "get_crypto_class",
    "register_algorithm",
]
