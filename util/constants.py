class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    AI = V1 + "/ai"
    ASK_QUESTION = AI + "/ask-question"
    CHAT_HISTORY = AI + "/chat-history/{courseId}"
    AI_STATUS = AI + "/status/{courseId}"
    UPLOAD_DOCUMENTS = AI + "/upload-documents/{courseId}"
    GENERATE_QUIZ = AI + "/generate-quiz/{courseId}"

