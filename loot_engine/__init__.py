"""Loot Engine: 어픽스/아이템/루트 풀 절차적 생성"""
