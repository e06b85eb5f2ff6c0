from abc import ABC, abstractmethod
from enum import Enum, unique


@unique
class EncryptionAlgorithm(str, Enum):
    RSA = "rsa"
    # 将来可以在这里添加 SM2 = "sm2"


_ALGORITHM_REGISTRY: dict[EncryptionAlgorithm, type["BaseCryptoUtil"]] = {}


class KeyMaterialError(ValueError):
    """密钥缺失或无法解析"""


def register_algorithm(algo: EncryptionAlgorithm):
    """
    装饰器：将加密实现类注册到全局注册表中。
    """

    def decorator(cls):
        _ALGORITHM_REGISTRY[algo] = cls
        return cls

    return decorator


class BaseCryptoUtil(ABC):
    @abstractmethod
    def encrypt(self, plain_text: str) -> str:
        pass

    @abstractmethod
    def decrypt(self, cipher_text: str) -> str:
        pass
