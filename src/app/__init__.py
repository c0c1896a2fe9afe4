"""
App layer: 관리 화면용 API 서버 (FastAPI).

역할:
- 세션별 coordinator 연결, 요청 파라미터 → 액션 payload 변환
- ActionOutcome → HTTP 응답 (feedback, navigate_to 포함)
- ⚠️ 오케스트레이션 로직 없음 (core에 위임)
"""
