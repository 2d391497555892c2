"""Operator definitions: concat, element-wise, matmul, transpose and unary operators."""